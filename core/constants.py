# core/constants.py

# --- Collections (document store) ---
COLLECTION_USERS = "users"
COLLECTION_PROJECTS = "projects"
COLLECTION_TASKS = "tasks"
COLLECTION_COMPLETED_TASKS = "completed_tasks"  # append-only audit trail
COLLECTION_PROJECT_CHATS = "project_chats"
COLLECTION_PRIVATE_CHATS = "private_chats"

# --- Roles & account status ---
ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),
    (ROLE_USER, "User"),
]

STATUS_ACTIVE = "active"
STATUS_DISABLED = "disabled"
ACCOUNT_STATUS_CHOICES = [
    (STATUS_ACTIVE, "Active"),
    (STATUS_DISABLED, "Disabled"),
]

# --- Tasks ---
TASK_TODO = "todo"
TASK_IN_PROGRESS = "in-progress"
TASK_COMPLETED = "completed"
TASK_STATUS_CHOICES = [
    (TASK_TODO, "To Do"),
    (TASK_IN_PROGRESS, "In Progress"),
    (TASK_COMPLETED, "Completed"),
]

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_CHOICES = [
    (PRIORITY_LOW, "Low"),
    (PRIORITY_MEDIUM, "Medium"),
    (PRIORITY_HIGH, "High"),
]

# Recorded as creator on admin-made projects/tasks
CREATED_BY_ADMIN = "admin"

# --- Settings / theme ---
THEME_LIGHT = "light"
THEME_DARK = "dark"
THEME_CHOICES = [
    (THEME_LIGHT, "Light"),
    (THEME_DARK, "Dark"),
]

# --- Chat ---
GENERAL_CHANNEL = "general"  # admin-wide room, a project chat with a fixed id

# --- Routes ---
LOGIN_PATH = "/login"
ADMIN_DASHBOARD_PATH = "/dashboard/admin"
USER_DASHBOARD_PATH = "/dashboard/user"

# --- Identity events ---
AUTH_SIGNED_IN = "SIGNED_IN"
AUTH_SIGNED_OUT = "SIGNED_OUT"
