from __future__ import annotations

from typing import Dict, List, Optional, Tuple

# Canonical skill checklists per domain, used to seed a roadmap's skill list.
# Order matters twice: skills are shown in list order, and fuzzy lookup
# returns the first matching domain in table order.
DOMAIN_SKILLS: Dict[str, Tuple[str, ...]] = {
    "AI/ML": (
        "Python Programming",
        "Mathematics (Linear Algebra, Calculus, Statistics)",
        "Machine Learning Fundamentals",
        "Deep Learning",
        "Neural Networks",
        "TensorFlow/PyTorch",
        "Natural Language Processing (NLP)",
        "Computer Vision",
        "Data Preprocessing",
        "Model Deployment",
    ),
    "Web Development": (
        "HTML5",
        "CSS3",
        "JavaScript",
        "React.js",
        "Node.js",
        "RESTful APIs",
        "Database Management",
        "Version Control (Git)",
        "Responsive Design",
        "TypeScript",
    ),
    "Data Science": (
        "Python/R Programming",
        "Statistics & Probability",
        "Data Visualization",
        "SQL & Databases",
        "Pandas & NumPy",
        "Data Cleaning",
        "Machine Learning",
        "Big Data Technologies",
        "Data Analysis",
        "Excel & Tableau",
    ),
    "Mobile Development": (
        "React Native/Flutter",
        "iOS Development (Swift)",
        "Android Development (Kotlin)",
        "Mobile UI/UX",
        "API Integration",
        "Mobile Database",
        "App Deployment",
        "Push Notifications",
        "Mobile Security",
        "Performance Optimization",
    ),
    "DevOps": (
        "Linux Administration",
        "Docker & Containers",
        "Kubernetes",
        "CI/CD Pipelines",
        "AWS/Azure/GCP",
        "Infrastructure as Code",
        "Monitoring & Logging",
        "Security Best Practices",
        "Automation Scripts",
        "Version Control",
    ),
    "Cybersecurity": (
        "Network Security",
        "Cryptography",
        "Ethical Hacking",
        "Security Protocols",
        "Vulnerability Assessment",
        "Incident Response",
        "Security Tools (Wireshark, Metasploit)",
        "OWASP Top 10",
        "Penetration Testing",
        "Security Compliance",
    ),
    "Cloud Computing": (
        "AWS/Azure/GCP Fundamentals",
        "Cloud Architecture",
        "Virtual Machines",
        "Cloud Storage",
        "Serverless Computing",
        "Cloud Security",
        "Load Balancing",
        "Auto-scaling",
        "Cloud Networking",
        "Cost Optimization",
    ),
    "Blockchain": (
        "Blockchain Fundamentals",
        "Cryptocurrency Basics",
        "Smart Contracts",
        "Solidity Programming",
        "Ethereum Development",
        "Web3.js",
        "Consensus Mechanisms",
        "DeFi Concepts",
        "NFTs",
        "Blockchain Security",
    ),
    "Game Development": (
        "Unity/Unreal Engine",
        "C# or C++ Programming",
        "Game Design Principles",
        "3D Modeling",
        "Physics Engine",
        "Animation",
        "Game AI",
        "Multiplayer Networking",
        "UI/UX for Games",
        "Performance Optimization",
    ),
    "UI/UX Design": (
        "Design Principles",
        "Figma/Adobe XD",
        "User Research",
        "Wireframing",
        "Prototyping",
        "Color Theory",
        "Typography",
        "Interaction Design",
        "Usability Testing",
        "Accessibility Standards",
    ),
    "Exam Prep - JEE": (
        "Physics",
        "Chemistry",
        "Mathematics",
        "Mechanics",
        "Thermodynamics",
        "Organic Chemistry",
        "Inorganic Chemistry",
        "Calculus",
        "Algebra",
        "Coordinate Geometry",
    ),
    "Exam Prep - NEET": (
        "Physics",
        "Chemistry",
        "Biology",
        "Zoology",
        "Botany",
        "Organic Chemistry",
        "Inorganic Chemistry",
        "Physical Chemistry",
        "Mechanics",
        "Human Physiology",
    ),
    "Exam Prep - GATE": (
        "Engineering Mathematics",
        "Digital Logic",
        "Computer Organization",
        "Data Structures",
        "Algorithms",
        "Operating Systems",
        "Database Management",
        "Computer Networks",
        "Theory of Computation",
        "Compiler Design",
    ),
    "Exam Prep - CAT": (
        "Quantitative Aptitude",
        "Verbal Ability",
        "Data Interpretation",
        "Logical Reasoning",
        "Reading Comprehension",
        "Time Management",
        "Mock Tests",
        "Mental Math",
        "Grammar & Vocabulary",
        "Problem Solving",
    ),
    "Exam Prep - GRE": (
        "Verbal Reasoning",
        "Quantitative Reasoning",
        "Analytical Writing",
        "Vocabulary Building",
        "Reading Comprehension",
        "Math Concepts",
        "Critical Thinking",
        "Essay Writing",
        "Test-taking Strategies",
        "Practice Tests",
    ),
    "Exam Prep - UPSC": (
        "History",
        "Geography",
        "Polity",
        "Economy",
        "Environment & Ecology",
        "Science & Technology",
        "Current Affairs",
        "Ethics & Integrity",
        "Optional Subject",
        "Essay Writing",
    ),
}

# Generic checklist for labels no domain matches.
DEFAULT_SKILLS: Tuple[str, ...] = (
    "Core Concepts",
    "Practical Application",
    "Advanced Topics",
    "Industry Tools",
    "Best Practices",
    "Project Development",
    "Problem Solving",
    "Documentation",
    "Testing & Debugging",
    "Continuous Learning",
)


def list_domains() -> List[str]:
    return list(DOMAIN_SKILLS)


def get_skills_for_domain(label: Optional[str]) -> List[str]:
    """
    Resolve a category/domain label to its skill checklist.

    Resolution order:
      1. exact key match
      2. case-insensitive substring match in either direction (first key in table order wins)
      3. DEFAULT_SKILLS

    An empty/None label returns [] (nothing to seed), which is distinct from
    "no domain matched" (DEFAULT_SKILLS). Always returns a new list.
    """
    if not isinstance(label, str) or not label.strip():
        return []

    if label in DOMAIN_SKILLS:
        return list(DOMAIN_SKILLS[label])

    wanted = label.strip().lower()
    for key, skills in DOMAIN_SKILLS.items():
        k = key.lower()
        if k in wanted or wanted in k:
            return list(skills)

    return list(DEFAULT_SKILLS)
