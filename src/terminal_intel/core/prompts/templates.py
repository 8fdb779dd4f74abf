"""
Prompt templates for the inference providers.

Templates use ``{{name}}`` placeholders. Context sections that may be absent
(recent commands, repository, branch) are rendered by the builder functions
as either a full line or an empty string.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..types import CommandContext

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


@dataclass(frozen=True)
class PromptTemplate:
    """A named prompt with ``{{name}}`` placeholders."""
    name: str
    template: str
    temperature: float
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Template name is required")
        if not self.template:
            raise ValueError("Template text is required")

    @property
    def variables(self) -> List[str]:
        return list(dict.fromkeys(_PLACEHOLDER.findall(self.template)))

    def render(self, **values: str) -> str:
        """Substitute values; unknown placeholders are left untouched."""
        return _PLACEHOLDER.sub(
            lambda m: str(values[m.group(1)]) if m.group(1) in values else m.group(0),
            self.template,
        )


SUGGESTION_TEMPLATE = PromptTemplate(
    name="terminal_suggestions",
    description="Rank 3-5 commands for a partial input",
    temperature=0.3,
    template="""You are a terminal command assistant. Suggest 3-5 relevant terminal commands based on the user's input.

User input: "{{input}}"
{{recent_context}}
{{repo_context}}

Return ONLY a JSON array of suggestions in this exact format:
[
  {"command": "git status", "description": "Show working tree status", "confidence": 0.95},
  {"command": "git add .", "description": "Stage all changes", "confidence": 0.85}
]

Rules:
- Focus on Git commands if in a repository
- Include common terminal commands (ls, cd, grep, etc.)
- Be concise (descriptions max 50 chars)
- Order by relevance (highest confidence first)
- Return ONLY valid JSON, no other text""",
)

ERROR_TEMPLATE = PromptTemplate(
    name="terminal_error",
    description="Explain a failed command",
    temperature=0.2,
    template="""You are a helpful terminal assistant. Explain this error and suggest a fix.

Command: {{command}}
Error output:
{{error}}
{{repo_context}}

Provide:
1. Brief explanation of what went wrong
2. Suggested fix (command or steps)
3. Keep it concise (max 200 words)

Format as plain text, not JSON.""",
)

TRANSLATION_TEMPLATE = PromptTemplate(
    name="nl_translation",
    description="Turn a natural-language request into one command",
    temperature=0.3,
    template="""You are a terminal command expert. Convert natural language to shell commands.

User request: "{{input}}"
{{dir_context}}
{{branch_context}}
{{recent_context}}
OS: {{os_type}}

Return a JSON response with this exact format:
{
  "command": "the command to run",
  "explanation": "brief explanation of what it does",
  "confidence": 0.95,
  "alternatives": ["alternative 1", "alternative 2"],
  "warnings": ["any warnings if needed"],
  "category": "Git|File|Network|System|Docker|NPM|Other"
}

Rules:
- Be accurate and safe
- Include warnings for destructive operations
- Provide alternatives when applicable
- Return ONLY valid JSON""",
)

EXPLANATION_TEMPLATE = PromptTemplate(
    name="command_explanation",
    description="Explain what a command does",
    temperature=0.3,
    template="""Explain this terminal command in simple terms:

Command: {{command}}
Context: {{working_directory}}

Provide:
1. What the command does
2. Common use cases
3. Important flags or options
4. Any risks or warnings

Keep it concise (max 150 words).""",
)

TEMPLATES: Dict[str, PromptTemplate] = {
    t.name: t for t in (SUGGESTION_TEMPLATE, ERROR_TEMPLATE, TRANSLATION_TEMPLATE, EXPLANATION_TEMPLATE)
}


def _recent_line(recent_commands: Sequence[str], limit: int) -> str:
    if not recent_commands or limit <= 0:
        return ""
    return f"Recent commands: {', '.join(list(recent_commands)[-limit:])}"


def build_suggestion_prompt(text: str, context: CommandContext, recent_limit: int = 3) -> str:
    return SUGGESTION_TEMPLATE.render(
        input=text,
        recent_context=_recent_line(context.recent_commands, recent_limit),
        repo_context=f"Working in Git repository: {context.repo_path}" if context.repo_path else "",
    )


def build_error_prompt(command: str, error_output: str, working_directory: Optional[str]) -> str:
    return ERROR_TEMPLATE.render(
        command=command,
        error=error_output,
        repo_context=f"Working directory: {working_directory}" if working_directory else "",
    )


def build_translation_prompt(text: str, context: CommandContext, recent_limit: int = 3) -> str:
    return TRANSLATION_TEMPLATE.render(
        input=text,
        dir_context=f"Working directory: {context.working_directory}" if context.working_directory else "",
        branch_context=f"Git branch: {context.git_branch}" if context.git_branch else "",
        recent_context=_recent_line(context.recent_commands, recent_limit),
        os_type=context.os_type,
    )


def build_explanation_prompt(command: str, context: CommandContext) -> str:
    return EXPLANATION_TEMPLATE.render(
        command=command,
        working_directory=context.working_directory or "unknown directory",
    )
