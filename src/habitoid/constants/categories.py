"""
Centralized habit category, frequency and template-pack definitions.
These drive habit defaults (color/icon), form choices and analytics labels.
"""

from __future__ import annotations

# id -> (label, icon, color)
HABIT_CATEGORIES: dict[str, tuple[str, str, str]] = {
    "health": ("Health & Fitness", "🏃", "#10b981"),
    "work": ("Work & Career", "💼", "#6366f1"),
    "learning": ("Learning & Growth", "📚", "#f59e0b"),
    "mindfulness": ("Mindfulness", "🧘", "#8b5cf6"),
    "social": ("Social & Relationships", "👥", "#ec4899"),
    "finance": ("Finance", "💰", "#22c55e"),
    "creativity": ("Creativity", "🎨", "#f43f5e"),
    "other": ("Other", "📌", "#50A65C"),
}

DEFAULT_CATEGORY = "other"

FREQUENCY_OPTIONS: list[tuple[str, str, str]] = [
    ("daily", "Every Day", "Complete daily"),
    ("weekdays", "Weekdays", "Mon-Fri only"),
    ("weekends", "Weekends", "Sat-Sun only"),
    ("weekly", "Weekly", "Once per week"),
    ("3x_week", "3x per Week", "Three times weekly"),
    ("custom", "Custom", "Pick specific days"),
]


def category_label(category: str) -> str:
    return HABIT_CATEGORIES.get(category, (category, "", ""))[0]


def category_style(category: str) -> tuple[str, str]:
    """Return (icon, color) for a category, falling back to ``other``."""

    _, icon, color = HABIT_CATEGORIES.get(category, HABIT_CATEGORIES[DEFAULT_CATEGORY])
    return icon, color


# Pre-built template packs: id -> (name, description, [(habit, icon, category, frequency)])
HABIT_TEMPLATES: dict[str, tuple[str, str, list[tuple[str, str, str, str]]]] = {
    "morning-routine": (
        "Morning Routine Pack",
        "Start your day right with these essential habits",
        [
            ("Wake up early", "⏰", "health", "daily"),
            ("Drink water", "💧", "health", "daily"),
            ("Meditate 10 min", "🧘", "mindfulness", "daily"),
            ("Exercise", "🏃", "health", "daily"),
            ("Healthy breakfast", "🥗", "health", "daily"),
        ],
    ),
    "fitness-starter": (
        "Fitness Starter Pack",
        "Build a consistent workout routine",
        [
            ("10,000 steps", "🚶", "health", "daily"),
            ("Workout 30 min", "🏋️", "health", "3x_week"),
            ("Stretch/Yoga", "🧘", "health", "daily"),
            ("No junk food", "🍎", "health", "daily"),
            ("Sleep 8 hours", "😴", "health", "daily"),
        ],
    ),
    "productivity-pro": (
        "Productivity Pro Pack",
        "Boost your work and focus",
        [
            ("Plan the day", "📋", "work", "weekdays"),
            ("Deep work 2 hours", "🎯", "work", "weekdays"),
            ("Inbox zero", "📧", "work", "daily"),
            ("Review goals", "🎪", "work", "weekly"),
            ("Learn something new", "📚", "learning", "daily"),
        ],
    ),
    "mindful-living": (
        "Mindful Living Pack",
        "Cultivate peace and presence",
        [
            ("Morning meditation", "🧘", "mindfulness", "daily"),
            ("Gratitude journal", "📝", "mindfulness", "daily"),
            ("Digital detox 1 hour", "📵", "mindfulness", "daily"),
            ("Evening reflection", "🌙", "mindfulness", "daily"),
            ("Nature walk", "🌳", "mindfulness", "3x_week"),
        ],
    ),
    "learning-machine": (
        "Learning Machine Pack",
        "Commit to continuous learning",
        [
            ("Read 30 min", "📖", "learning", "daily"),
            ("Online course 1 lesson", "💻", "learning", "daily"),
            ("Practice a skill", "🎯", "learning", "daily"),
            ("Write/Notes", "✍️", "learning", "daily"),
            ("Teach someone", "👨‍🏫", "learning", "weekly"),
        ],
    ),
    "social-butterfly": (
        "Social Connection Pack",
        "Strengthen your relationships",
        [
            ("Text a friend", "💬", "social", "daily"),
            ("Call family", "📞", "social", "weekly"),
            ("Random act of kindness", "💝", "social", "daily"),
            ("Quality time with loved ones", "❤️", "social", "3x_week"),
            ("Meet someone new", "🤝", "social", "weekly"),
        ],
    ),
}
