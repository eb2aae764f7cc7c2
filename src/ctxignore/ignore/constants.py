"""
Central configuration for build context ignore processing
"""

# Suffix of the ignore file: '.dockerignore' on its own, or appended to the
# Dockerfile name ('Dockerfile.dockerignore') for a Dockerfile-specific file
IGNORE_FILE_EXTENSION = ".dockerignore"

DOCKERFILE_NAME = "Dockerfile"

# Editor metadata never sent to the daemon, checked before the ignore file
ALWAYS_IGNORED = [
    "**/.idea",
    "**/.vs",
]

# Environment variable that silences the missing ignore file warning
IGNOREFILE_WARNING_ENV = "CTXIGNORE_IGNOREFILE_WARNING"

# Patterns written by 'ctxignore init'
DEFAULT_EXCLUSIONS = [
    # Version control
    ".git",
    ".gitignore",
    ".svn",
    ".hg",

    # Python
    "**/__pycache__",
    "**/*.py[cod]",
    ".venv",
    "venv",
    ".mypy_cache",
    ".pytest_cache",
    ".tox",
    ".coverage",
    "htmlcov",
    "*.egg-info",

    # JavaScript/TypeScript/Node.js
    "**/node_modules",
    "npm-debug.log*",
    "yarn-error.log*",
    ".next",

    # Build output
    "build",
    "dist",
    "**/*.o",

    # IDE and editor files
    ".vscode",
    "**/*.swp",
    "**/*~",

    # OS files
    "**/.DS_Store",
    "**/Thumbs.db",

    # Logs and temporary files
    "**/*.log",
    "**/*.tmp",

    # Environment files (often contain secrets)
    ".env",
    ".env.*",
    "!.env.example",
]

MINIMAL_EXCLUSIONS = [
    ".git",
    "**/__pycache__",
    ".venv",
    "**/node_modules",
    "**/.DS_Store",
]

# Limits for security and performance
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB
MAX_PATTERNS_PER_FILE = 10000
