"""Comment token lookup by language identifier."""

from pathlib import Path

DEFAULT_COMMENT_TOKEN = "#"

# Best-effort table grouped by comment convention; not a language database.
HASH_LANGUAGES = (
    "python",
    "ruby",
    "perl",
    "r",
    "yaml",
    "bash",
    "shell",
    "shellscript",
    "powershell",
)
SLASH_LANGUAGES = (
    "javascript",
    "typescript",
    "java",
    "c",
    "cpp",
    "csharp",
    "go",
    "rust",
    "swift",
    "kotlin",
    "php",
    "dart",
)

COMMENT_TOKENS: dict[str, str] = {
    **{lang: "#" for lang in HASH_LANGUAGES},
    **{lang: "//" for lang in SLASH_LANGUAGES},
}

# Extensions picked up by the workspace scan, mapped to language ids
EXTENSION_LANGUAGES: dict[str, str] = {
    ".py": "python",
    ".rb": "ruby",
    ".r": "r",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".sh": "shellscript",
    ".bash": "shellscript",
    ".ps1": "powershell",
    ".js": "javascript",
    ".ts": "typescript",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".php": "php",
    ".dart": "dart",
}


def comment_token_for(language_id: str | None) -> str:
    """Return the comment-start token for a language, `#` when unknown."""
    if not language_id:
        return DEFAULT_COMMENT_TOKEN
    return COMMENT_TOKENS.get(language_id.lower(), DEFAULT_COMMENT_TOKEN)


def language_for_path(path: Path | str) -> str:
    """Guess the language id of a file from its extension."""
    return EXTENSION_LANGUAGES.get(Path(path).suffix.lower(), "plaintext")
