#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/cleanup/commands.py
"""Detect command-line snippets in converted text and format them as code.

Word documents rarely mark shell commands as code, so after HTML-to-text
conversion they arrive as plain prose lines. A line is treated as a command
when either

- its first word (after a prompt symbol and ``sudo``) is a known command
  *and* something else on the line corroborates it, or
- it contains unmistakable shell syntax: flags, pipes, redirects, leading
  environment assignments, ``./`` paths, command substitution, ``$VAR``
  references or a shebang.

Detected commands become inline code spans or, when long or multi-part,
fenced code blocks. Lines that are not commands get a lighter inline scan
that wraps quoted commands and ``tool --flag`` phrases.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from kbconvert.constants import (
    DEFAULT_CODE_BLOCK_LANGUAGE,
    DEFAULT_MAX_INLINE_COMMAND_LENGTH,
    DEFAULT_MAX_QUOTED_COMMAND_LENGTH,
)

logger = logging.getLogger(__name__)

# Known command names, grouped for maintenance. Order matters only for
# INLINE_TOOL_COMMANDS below.
COMMAND_GROUPS: dict[str, tuple[str, ...]] = {
    "shell": (
        "curl", "wget", "ssh", "scp", "rsync", "tar", "gzip", "gunzip", "zip", "unzip",
        "chmod", "chown", "chgrp", "sudo", "su", "whoami", "id", "uname",
        "ls", "cd", "pwd", "mkdir", "rmdir", "rm", "cp", "mv", "cat", "head", "tail",
        "less", "more", "grep", "egrep", "fgrep", "sed", "awk", "cut", "sort", "uniq",
        "wc", "find", "locate", "which", "whereis", "file", "stat", "du", "df",
        "touch", "ln", "readlink", "basename", "dirname", "realpath",
        "echo", "printf", "read", "export", "env", "set", "unset", "source",
        "alias", "unalias", "type", "command", "hash", "history", "fc", "chroot",
        "ps", "top", "htop", "kill", "killall", "pkill", "pgrep", "jobs", "bg", "fg", "nohup",
        "systemctl", "service", "journalctl", "dmesg", "crontab", "at",
        "mount", "umount", "fdisk", "lsblk", "blkid", "mkfs", "fsck",
        "useradd", "userdel", "usermod", "passwd",
        "ip", "ifconfig", "netstat", "ss", "ping", "traceroute", "dig", "nslookup", "host",
        "nc", "netcat", "telnet", "ftp", "sftp",
        "iptables", "firewall-cmd", "ufw",
    ),
    "packages": (
        "apt", "apt-get", "apt-cache", "dpkg", "yum", "dnf", "rpm", "zypper",
        "pacman", "brew", "port", "snap", "flatpak",
        "gem", "bundle", "bundler", "cargo", "rustup", "rustc", "go", "gofmt",
        "composer", "php", "artisan", "nuget", "dotnet", "msbuild",
    ),
    "node": (
        "npm", "npx", "yarn", "pnpm", "node", "nodejs", "nvm", "fnm", "deno", "bun",
        "tsc", "tsx", "esbuild", "vite", "webpack", "rollup", "parcel",
        "eslint", "prettier", "jest", "vitest", "mocha",
    ),
    "python": (
        "python", "python3", "py", "pip", "pip3", "pipx", "conda", "virtualenv", "venv",
        "pytest", "poetry", "pdm", "uv", "ruff", "black", "mypy", "jupyter",
        "django-admin", "flask", "uvicorn", "gunicorn",
    ),
    "jvm": (
        "java", "javac", "jar", "mvn", "maven", "gradle", "gradlew", "ant",
        "scala", "sbt", "kotlin", "kotlinc", "clojure", "lein",
    ),
    "containers": (
        "docker", "docker-compose", "podman", "buildah", "skopeo",
        "kubectl", "k9s", "helm", "minikube", "kind", "k3s", "k3d",
        "terraform", "terragrunt", "pulumi", "ansible", "ansible-playbook",
        "aws", "az", "gcloud", "gsutil", "bq", "oc", "eksctl", "doctl",
        "vagrant", "packer", "salt", "puppet", "chef",
    ),
    "vcs": ("git", "gh", "hub", "svn", "hg", "mercurial"),
    "build": (
        "vim", "nvim", "vi", "nano", "emacs", "code", "subl",
        "make", "cmake", "ninja", "meson", "autoconf", "automake",
        "gcc", "g++", "clang", "clang++", "ld", "ar", "nm", "objdump",
        "gdb", "lldb", "valgrind", "strace", "ltrace", "ruby", "rails", "rake", "perl",
    ),
    "database": (
        "mysql", "mysqldump", "psql", "pg_dump", "pg_restore",
        "mongosh", "mongo", "mongodump", "mongorestore", "redis-cli", "sqlite3",
    ),
    "misc": (
        "jq", "yq", "xargs", "parallel", "watch", "timeout", "date", "cal", "tee", "tr", "diff", "patch", "bzip2", "xz",
        "base64", "md5sum", "sha256sum", "openssl", "gpg", "htpasswd", "certbot", "nginx", "apache2ctl",
        "ffmpeg", "convert", "identify", "pdftk", "gs",
    ),
}

CLI_COMMANDS: frozenset[str] = frozenset(name for group in COMMAND_GROUPS.values() for name in group)

# Tools recognised in "use <tool> <arg> --flag" phrases inside prose
INLINE_TOOL_COMMANDS: tuple[str, ...] = COMMAND_GROUPS["shell"][:50]

# Words that mark a line as a sentence rather than a command invocation
PROSE_WORDS = frozenset(
    {
        "a", "an", "the", "this", "that", "these", "those", "is", "are", "was", "were", "be", "been",
        "to", "of", "for", "with", "on", "in", "at", "by", "from", "into", "about", "and", "or", "but",
        "if", "then", "when", "while", "because", "so", "it", "its", "you", "your", "we", "our", "they",
        "their", "he", "she", "his", "her", "i", "my", "me", "us", "them", "can", "will", "should",
        "would", "could", "may", "might", "must", "not", "no", "some", "any", "all", "more", "most",
        "very", "just", "also", "out", "up", "down", "over", "here", "there", "what", "which", "who",
        "how", "why", "where", "sure", "like", "than",
    }
)

SHELL_SYNTAX_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s-{1,2}[a-zA-Z][\w-]*"),  # flags
    re.compile(r"\s\|\s"),  # pipe
    re.compile(r"\s[<>]{1,2}\s"),  # redirect
    re.compile(r"^[A-Z_][A-Z0-9_]*="),  # leading environment assignment
    re.compile(r"^[.~]/\S+"),  # ./script or ~/path
    re.compile(r"\$\([^)]+\)"),  # $(substitution)
    re.compile(r"=`[^`]+`"),  # VAR=`substitution`
    re.compile(r"\$(?:[A-Z_][A-Z0-9_]*\b|\{[^}]+\})"),  # $VAR or ${var}
    re.compile(r"^#!/\S+"),  # shebang
)

_PROMPT_PATTERN = re.compile(r"^[#$>%]+\s*(\S.*)$")
_SUDO_PATTERN = re.compile(r"^sudo\s+", re.IGNORECASE)
_FIRST_WORD_SPLIT = re.compile(r"[\s|;&]")
_BARE_URL_PATTERN = re.compile(r"^https?://\S+$")
_BARE_PATH_PATTERN = re.compile(r"^[/~][\w/.-]+$")
_MARKDOWN_LINK = re.compile(r"!?\[[^\]]*\]\([^)\s]+\)")

_FLAG_TOKEN = re.compile(r"(?:^|\s)-{1,2}[a-zA-Z]")
_OPERATOR = re.compile(r"[|;<>]|&&")
_PATH_FRAGMENT = re.compile(r"(?:^|\s)(?:\.{1,2}/|~/|/)[\w.-]|\w/[\w.-]")
_URL_SCHEME = re.compile(r"\b[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_KEY_VALUE = re.compile(r"(?:^|\s)[\w.-]+=\S")
_WORD = re.compile(r"[A-Za-z][\w'-]*")

_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*)$")
_PLAIN_HEADING_PATTERN = re.compile(r"^#{1,6}\s+[A-Z]", re.IGNORECASE)
_ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.")
_FENCE_PATTERN = re.compile(r"^(```|~~~)")
_QUOTED_PATTERN = re.compile(r'"([^"]+)"')
_INLINE_CODE_SPLIT = re.compile(r"(`[^`]*`)")
_TOOL_MENTION_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(name) for name in INLINE_TOOL_COMMANDS) + r")\s+([\w.-]+(?:\s+-{1,2}[\w-]+(?:=\S+)?)+)"
)

# Line prefixes that already carry markdown structure
_STRUCTURED_PREFIXES = ("`", ">", "-", "*", "+", "|")


@dataclass
class CommandFormatStats:
    """Counts gathered by one :func:`format_commands` run."""

    inline: int = 0
    fenced: int = 0
    inline_mentions: int = 0

    @property
    def total(self) -> int:
        return self.inline + self.fenced


def _strip_prompt(text: str) -> str:
    match = _PROMPT_PATTERN.match(text)
    return match.group(1) if match else text


def _has_corroborating_evidence(command_line: str, first_word: str) -> bool:
    """Return True if more than a lone dictionary word supports ``command_line``."""
    rest = command_line[len(first_word) :].strip()
    if not rest:
        return False

    if _FLAG_TOKEN.search(rest) or _URL_SCHEME.search(rest) or _KEY_VALUE.search(rest):
        return True

    # Operators, paths and plain words also occur in sentences
    if rest.endswith((".", "!", "?", ":")):
        return False
    words = [word.lower() for word in _WORD.findall(rest)]
    if any(word in PROSE_WORDS for word in words):
        return False
    if _OPERATOR.search(rest) or _PATH_FRAGMENT.search(rest):
        return True
    return bool(words) and first_word == first_word.lower()


def looks_like_command(text: str) -> bool:
    """Return True if ``text`` reads as a shell command invocation.

    Parameters
    ----------
    text : str
        A single line of converted text

    Examples
    --------
        >>> looks_like_command("curl -X POST https://api.example.com/v1/items")
        True
        >>> looks_like_command("go fishing this weekend")
        False

    """
    trimmed = text.strip()
    if len(trimmed) < 2 or trimmed.startswith("`"):
        return False
    if _BARE_URL_PATTERN.match(trimmed) or _BARE_PATH_PATTERN.match(trimmed) or _MARKDOWN_LINK.search(trimmed):
        return False
    if trimmed.startswith("#!/"):
        return True

    command_line = _SUDO_PATTERN.sub("", _strip_prompt(trimmed))
    first_word = _FIRST_WORD_SPLIT.split(command_line, maxsplit=1)[0]
    if first_word.lower() in CLI_COMMANDS and _has_corroborating_evidence(command_line, first_word):
        return True

    return any(pattern.search(command_line) for pattern in SHELL_SYNTAX_PATTERNS)


def should_be_code_block(command: str, max_inline_length: int = DEFAULT_MAX_INLINE_COMMAND_LENGTH) -> bool:
    """Return True if ``command`` should be fenced rather than an inline span."""
    return (
        "\n" in command
        or len(command) > max_inline_length
        or " \\" in command
        or command.count("|") >= 2
        or "`" in command
    )


def format_inline_commands(line: str, max_length: int = DEFAULT_MAX_QUOTED_COMMAND_LENGTH) -> str:
    """Wrap quoted commands and ``tool arg --flag`` phrases in code spans.

    Lines that already hold two or more backticks are returned unchanged.
    Quoted commands lose their quotes; text already inside code spans is never
    rescanned.
    """
    if line.count("`") >= 2:
        return line

    def wrap_quoted(match: re.Match[str]) -> str:
        content = match.group(1)
        if len(content) < max_length and looks_like_command(content):
            return f"`{content}`"
        return match.group(0)

    def wrap_mention(match: re.Match[str]) -> str:
        mention = match.group(0)
        return f"`{mention}`" if len(mention) < max_length else mention

    line = _QUOTED_PATTERN.sub(wrap_quoted, line)
    segments = _INLINE_CODE_SPLIT.split(line)
    for i in range(0, len(segments), 2):
        segments[i] = _TOOL_MENTION_PATTERN.sub(wrap_mention, segments[i])
    return "".join(segments)


def _is_structured(trimmed: str) -> bool:
    return trimmed.startswith(_STRUCTURED_PREFIXES) or bool(_ORDERED_ITEM_PATTERN.match(trimmed))


def format_commands(
    text: str,
    *,
    format_inline: bool = True,
    language: str = DEFAULT_CODE_BLOCK_LANGUAGE,
    max_inline_length: int = DEFAULT_MAX_INLINE_COMMAND_LENGTH,
    max_quoted_length: int = DEFAULT_MAX_QUOTED_COMMAND_LENGTH,
    stats: CommandFormatStats | None = None,
) -> str:
    """Format every command-looking line of ``text`` as code.

    Parameters
    ----------
    text : str
        Converted markdown text
    format_inline : bool, default True
        Run the inline scan over lines that are not commands themselves
    language : str, default "bash"
        Info string for generated fences
    max_inline_length : int, default 80
        Longest command kept as an inline span
    max_quoted_length : int, default 60
        Longest quoted command or tool mention wrapped inside prose
    stats : CommandFormatStats, optional
        Receives the number of lines formatted

    Returns
    -------
    str
        The text with commands wrapped; line count may grow where fences are added

    Notes
    -----
    Content between existing fences, quotes, list items, table rows, blank
    lines and headings whose text is not itself a command pass through
    untouched. Lines holding a markdown link read as prose.

    """
    stats = stats if stats is not None else CommandFormatStats()
    output: list[str] = []
    in_fence = False

    for line in text.split("\n"):
        trimmed = line.strip()

        if _FENCE_PATTERN.match(trimmed):
            in_fence = not in_fence
            output.append(line)
            continue
        if in_fence or not trimmed:
            output.append(line)
            continue

        heading = _HEADING_PATTERN.match(trimmed)
        if heading and _PLAIN_HEADING_PATTERN.match(trimmed) and not looks_like_command(heading.group(2)):
            output.append(line)
            continue

        if _is_structured(trimmed):
            output.append(line)
            continue

        if looks_like_command(trimmed):
            if should_be_code_block(trimmed, max_inline_length):
                output.extend([f"```{language}", trimmed, "```"])
                stats.fenced += 1
            else:
                output.append(f"`{trimmed}`")
                stats.inline += 1
            continue

        if format_inline:
            formatted = format_inline_commands(line, max_quoted_length)
            if formatted != line:
                stats.inline_mentions += 1
            line = formatted
        output.append(line)

    if stats.total:
        logger.info("Formatted %d command line(s) as code", stats.total)
    return "\n".join(output)
