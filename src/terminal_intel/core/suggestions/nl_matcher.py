"""
Rule-based natural-language to command matching.

An ordered table of regex rules is run against the lowercased request; the
first match wins. Template placeholders are filled from context where
possible (``{{branch}}`` from the current git branch) and otherwise left in
place for the caller to prompt for.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Sequence

from ..types import CommandCategory, CommandContext, NLCommandResponse

RULE_CONFIDENCE = 0.9


@dataclass(frozen=True)
class NLPattern:
    """One phrase rule: regex, command templates (first is primary) and metadata."""
    regex: str
    templates: Sequence[str]
    category: CommandCategory
    explanation: str
    requires_input: bool = False
    warnings: Sequence[str] = field(default_factory=tuple)

    @property
    def compiled(self) -> Pattern:
        return re.compile(self.regex)


DEFAULT_PATTERNS: Sequence[NLPattern] = (
    # Git
    NLPattern(r"show.*status|check.*status|what.*changed|modified.*files",
              ("git status", "git status --porcelain", "git status -s"),
              CommandCategory.GIT, "Shows the working tree status"),
    NLPattern(r"add.*all|stage.*all|add.*changes",
              ("git add .", "git add -A"),
              CommandCategory.GIT, "Stage all changes for commit"),
    NLPattern(r"commit.*changes|save.*changes",
              ('git commit -m "{{message}}"',),
              CommandCategory.GIT, "Commit staged changes with a message", requires_input=True),
    NLPattern(r"push.*changes|upload.*changes",
              ("git push", "git push origin {{branch}}"),
              CommandCategory.GIT, "Push commits to remote repository"),
    NLPattern(r"pull.*changes|download.*changes|update.*from.*remote",
              ("git pull", "git pull origin {{branch}}"),
              CommandCategory.GIT, "Pull changes from remote repository"),
    NLPattern(r"show.*log|show.*history|recent.*commits",
              ("git log --oneline -10", "git log --graph --oneline"),
              CommandCategory.GIT, "Show recent commit history"),
    NLPattern(r"create.*branch|new.*branch",
              ("git branch {{name}}", "git checkout -b {{name}}"),
              CommandCategory.GIT, "Create a new branch", requires_input=True),
    NLPattern(r"switch.*branch|checkout.*branch",
              ("git checkout {{branch}}",),
              CommandCategory.GIT, "Switch to a different branch", requires_input=True),

    # Files
    NLPattern(r"list.*files|show.*files|ls|dir",
              ("ls -la", "ls"),
              CommandCategory.FILE, "List files in current directory"),
    NLPattern(r"change.*directory|cd.*to|go.*to",
              ("cd {{path}}",),
              CommandCategory.FILE, "Change to a different directory", requires_input=True),
    NLPattern(r"create.*folder|new.*folder|mkdir",
              ("mkdir {{name}}",),
              CommandCategory.FILE, "Create a new directory", requires_input=True),
    NLPattern(r"remove.*file|delete.*file|rm",
              ("rm {{file}}",),
              CommandCategory.FILE, "Remove a file", requires_input=True,
              warnings=("This will permanently delete the file",)),
    NLPattern(r"copy.*file|duplicate.*file|cp",
              ("cp {{source}} {{destination}}",),
              CommandCategory.FILE, "Copy a file", requires_input=True),
    NLPattern(r"move.*file|rename.*file|mv",
              ("mv {{source}} {{destination}}",),
              CommandCategory.FILE, "Move or rename a file", requires_input=True),
    NLPattern(r"find.*file|search.*file",
              ('find . -name "{{pattern}}"', 'grep -r "{{pattern}}" .'),
              CommandCategory.FILE, "Search for files or content", requires_input=True),

    # Docker
    NLPattern(r"list.*containers|show.*containers|docker.*ps",
              ("docker ps", "docker ps -a"),
              CommandCategory.DOCKER, "List Docker containers"),
    NLPattern(r"run.*container|docker.*run",
              ("docker run -it {{image}}",),
              CommandCategory.DOCKER, "Run a Docker container", requires_input=True),
    NLPattern(r"build.*image|docker.*build",
              ("docker build -t {{name}} .",),
              CommandCategory.DOCKER, "Build a Docker image", requires_input=True),
    NLPattern(r"docker.*compose.*up|start.*services",
              ("docker-compose up -d",),
              CommandCategory.DOCKER, "Start Docker Compose services"),

    # npm
    NLPattern(r"install.*deps|npm.*install",
              ("npm install",),
              CommandCategory.NPM, "Install npm dependencies"),
    NLPattern(r"run.*dev|start.*dev|npm.*dev",
              ("npm run dev",),
              CommandCategory.NPM, "Start development server"),
    NLPattern(r"build.*project|npm.*build",
              ("npm run build",),
              CommandCategory.NPM, "Build the project"),

    # System
    NLPattern(r"show.*processes|list.*processes|ps",
              ("ps aux", "ps -ef"),
              CommandCategory.SYSTEM, "List running processes"),
    NLPattern(r"kill.*process|stop.*process",
              ("kill {{pid}}", "kill -9 {{pid}}"),
              CommandCategory.SYSTEM, "Terminate a process", requires_input=True,
              warnings=("This will forcefully terminate the process",)),
)


class NLPatternMatcher:
    """First-match-wins regex table over free-text requests."""

    def __init__(self, patterns: Sequence[NLPattern] = DEFAULT_PATTERNS):
        self.patterns = list(patterns)
        self._compiled = [(p, p.compiled) for p in self.patterns]

    @staticmethod
    def fill_template(template: str, context: Optional[CommandContext]) -> str:
        """Fill placeholders the context can answer; leave the rest literal."""
        if context is not None and context.git_branch:
            template = template.replace("{{branch}}", context.git_branch)
        return template

    def match(self, text: str, context: Optional[CommandContext] = None) -> Optional[NLCommandResponse]:
        """Translate `text` with the first matching rule, or None if no rule matches."""
        cleaned = text.strip().lower()
        if not cleaned:
            return None

        for pattern, regex in self._compiled:
            if regex.search(cleaned):
                commands: List[str] = [self.fill_template(t, context) for t in pattern.templates]
                return NLCommandResponse(
                    command=commands[0],
                    explanation=pattern.explanation,
                    confidence=RULE_CONFIDENCE,
                    alternatives=commands[1:],
                    warnings=list(pattern.warnings),
                    category=pattern.category,
                )
        return None
