"""
Deterministic command suggestions for git, docker and npm.

This is the last stop of the suggestion fallback chain: no network, no
suspension, never raises.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from ..types import AICommandSuggestion


@dataclass(frozen=True)
class StaticRule:
    """Suggestions emitted when `applies(input)` holds for the normalized input."""
    applies: Callable[[str], bool]
    entries: Sequence[Tuple[str, str, float]]
    category: str


def _contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda text: any(needle in text for needle in needles)


def _equals_any(*values: str) -> Callable[[str], bool]:
    return lambda text: text in values


def _git_family(text: str) -> bool:
    return text == "git" or text.startswith("git ") or text.startswith("g")


def _docker_family(text: str) -> bool:
    return "docker" in text or text.startswith("d")


GIT_RULES = (
    StaticRule(_equals_any("git", "g"), (
        ("git status", "Show the working tree status", 0.95),
        ("git add .", "Stage all changes", 0.90),
        ('git commit -m ""', "Commit changes", 0.85),
        ("git push", "Push to remote", 0.80),
        ("git pull", "Pull from remote", 0.80),
    ), "Git"),
    StaticRule(_contains_any("s", "stat"), (("git status", "Show the working tree status", 0.85),), "Git"),
    StaticRule(_contains_any("a", "add"), (("git add .", "Stage all changes", 0.80),), "Git"),
    StaticRule(_contains_any("c", "commit"), (('git commit -m ""', "Commit staged changes with message", 0.80),), "Git"),
    StaticRule(_contains_any("pu", "push"), (("git push", "Push commits to remote", 0.75),), "Git"),
    StaticRule(_contains_any("pl", "pull"), (("git pull", "Pull changes from remote", 0.75),), "Git"),
    StaticRule(_contains_any("l", "log"), (("git log --oneline -10", "Show recent commits", 0.75),), "Git"),
)

DOCKER_RULES = (
    StaticRule(_equals_any("docker", "d"), (
        ("docker ps", "List containers", 0.90),
        ("docker-compose up -d", "Start services", 0.85),
    ), "Docker"),
    StaticRule(_contains_any("ps"), (("docker ps", "List running containers", 0.70),), "Docker"),
    StaticRule(_contains_any("compose"), (("docker-compose up -d", "Start containers in background", 0.75),), "Docker"),
)

NPM_RULES = (
    StaticRule(lambda text: True, (
        ("npm install", "Install dependencies", 0.70),
        ("npm run dev", "Run development server", 0.70),
    ), "Node"),
)

# (family gate, rules within the family) in emission order
FAMILIES = (
    (_git_family, GIT_RULES),
    (_docker_family, DOCKER_RULES),
    (_contains_any("npm"), NPM_RULES),
)


class StaticSuggestionTable:
    """Keyword table over git/docker/npm shortcuts."""

    def __init__(self, families=FAMILIES):
        self.families = families

    def suggest(self, text: str) -> List[AICommandSuggestion]:
        """Suggestions for `text`, deduplicated by command (first occurrence wins)."""
        normalized = text.strip().lower()
        if not normalized:
            return []

        suggestions: List[AICommandSuggestion] = []
        seen = set()
        for family_applies, rules in self.families:
            if not family_applies(normalized):
                continue
            for rule in rules:
                if not rule.applies(normalized):
                    continue
                for command, description, confidence in rule.entries:
                    if command in seen:
                        continue
                    seen.add(command)
                    suggestions.append(AICommandSuggestion(
                        command=command,
                        description=description,
                        confidence=confidence,
                        is_from_ai=False,
                        category=rule.category,
                    ))
        return suggestions
