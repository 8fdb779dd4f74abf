"""
Seed workflows offered before the user has saved any of their own.
"""

from typing import List

from .models import TerminalWorkflow, WorkflowParameter


def default_workflows() -> List[TerminalWorkflow]:
    """Fresh copies of the built-in workflows."""
    return [
        TerminalWorkflow("Git Status", "Show git status", "git status",
                         category="Git", tags=["git", "status"]),
        TerminalWorkflow("Git Add All", "Stage all changes", "git add .",
                         category="Git", tags=["git", "add"]),
        TerminalWorkflow(
            "Git Commit", "Commit with message", 'git commit -m "{{message}}"',
            parameters=[WorkflowParameter("message", "Commit message", "Enter commit message", required=True)],
            category="Git", tags=["git", "commit"],
        ),
        TerminalWorkflow("Git Push", "Push commits to remote", "git push",
                         category="Git", tags=["git", "push"]),
        TerminalWorkflow("Git Pull", "Pull changes from remote", "git pull",
                         category="Git", tags=["git", "pull"]),
        TerminalWorkflow("Docker Compose Up", "Start docker compose", "docker-compose up -d",
                         category="Docker", tags=["docker", "compose"]),
        TerminalWorkflow("Docker PS", "List running containers", "docker ps",
                         category="Docker", tags=["docker", "containers"]),
        TerminalWorkflow("NPM Install", "Install node modules", "npm install",
                         category="Node", tags=["npm", "install"]),
        TerminalWorkflow("NPM Run Dev", "Start the development server", "npm run dev",
                         category="Node", tags=["npm", "dev"]),
        TerminalWorkflow(
            "Find Files", "Find files by name", 'find . -name "{{filename}}"',
            parameters=[WorkflowParameter("filename", "File name pattern", "*.js", required=True)],
            category="Files", tags=["find", "search"],
        ),
    ]
