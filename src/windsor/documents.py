"""Starter documents and editor instructions written into projects."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import yaml

from .models import iso_timestamp

INSTRUCTIONS_BODY = """\
# Project Instructions

## Product Overview
[Describe your product here]

## Current Phase
- [ ] Idea Validation (IDEA_GUIDE.md)
- [ ] Product Blueprint (BLUEPRINT_GUIDE.md)
- [ ] Development (Building MVP)
- [ ] Beta/Launch
- [ ] Production

## Quick Links
- Problem Validation: [Link to doc]
- Product Spec: [Link to doc]
- Technical Architecture: [Link to doc]
- API Documentation: [Link to doc]
- MVP Roadmap: [Link to doc]

## Technology Stack
- Frontend: [Tech]
- Backend: [Tech]
- Database: [Tech]
- Deployment: [Platform]

## Team Roles
- Product Lead: @[Name]
- Tech Lead: @[Name]
- Developers: @[Name], @[Name]

## Current Sprint
- Sprint: [Sprint number/dates]
- Goal: [Sprint goal]
- Target: [Target date]

## Success Metrics
1. [Metric 1]: [Target]
2. [Metric 2]: [Target]
3. [Metric 3]: [Target]

## Development Workflow
- Daily standup: [Time] UTC in [Channel]
- Code review: [Requirements]
- Deployment: [Process]

## Change Log
### v1.0 ({today})
- Initial setup
"""

ROADMAP_BODY = """\
# Product Roadmap

## Current Status
- Phase: [Current phase]
- Completion: [X%]
- Team Size: [X]
- Launch Target: [Date]

## Next 12 Weeks

### Week 1-4: [Phase Name]
**Goal:** [Specific deliverable]
**Owner:** @[Name]

#### Week 1-2
- [ ] Task 1
- [ ] Task 2

#### Week 3-4
- [ ] Task 3
- [ ] Task 4

**Success Criteria:**
- Metric 1: [Target]
- Metric 2: [Target]

## Milestones

| Date | Milestone | Status |
|------|-----------|--------|
| {today} | MVP Features Complete | Not Started |
| {beta} | Beta Launch | Not Started |

## Change Log
### v1.0 ({today})
- Initial roadmap
"""

CUSTOM_INSTRUCTIONS = """\
# Windsor Project Constitution - Custom Instructions

This project follows the Windsor Project Constitution system.

## Always Reference These Files

When working on this project, always reference:
- @IDEA_GUIDE.md - For idea validation
- @BLUEPRINT_GUIDE.md - For product specifications
- @CURSOR.md - For development standards
- @INSTRUCTIONS.md - For current project status
- @.cursor/rules/ - For project-specific rules

## Project Structure

This project follows the Windsor Constitution structure:
- docs/IDEA/ - Idea validation documents
- docs/BLUEPRINT/ - Product specifications
- docs/OPERATIONS/ - Deployment and operations
- docs/TEAM/ - Team documentation
- docs/METRICS/ - Success metrics

## Development Standards

Follow the standards defined in:
- .cursor/rules/project-guidelines.mdc
- .cursor/rules/api-standards.mdc
- .cursor/rules/testing-requirements.mdc
- .cursor/rules/security-checklist.mdc

## Quick Commands

```bash
# Reference documentation
@INSTRUCTIONS.md What is the current project status?

# Check standards
@.cursor/rules/api-standards.mdc Review this API endpoint

# Validate idea
@IDEA_GUIDE.md Help me validate this product idea
```

## Installation Source

This project was {action} using:
- Windsor Project Constitution v{version}
- Installed: {installed}
- Command: {command}
"""


def render_front_matter(title: str, timestamp: str) -> str:
    """YAML front matter block shared by the starter documents."""
    meta = {
        "title": title,
        "created_at": timestamp,
        "updated_at": timestamp,
        "status": "Active",
        "version": 1.0,
    }
    return f"---\n{yaml.safe_dump(meta, sort_keys=False)}---\n\n"


def render_instructions(now: datetime) -> str:
    timestamp = iso_timestamp(now)
    body = INSTRUCTIONS_BODY.format(today=now.date().isoformat())
    return render_front_matter("Project Instructions", timestamp) + body


def render_roadmap(now: datetime) -> str:
    timestamp = iso_timestamp(now)
    body = ROADMAP_BODY.format(
        today=now.date().isoformat(),
        beta=(now + timedelta(days=30)).date().isoformat(),
    )
    return render_front_matter("Product Roadmap", timestamp) + body


def write_initial_docs(root: Path, now: datetime | None = None) -> list[str]:
    """Create INSTRUCTIONS.md and ROADMAP.md unless they already exist.

    Returns:
        Names of the documents that were created
    """
    root = Path(root)
    now = now or datetime.now(tz=UTC)
    created: list[str] = []
    for name, render in (
        ("INSTRUCTIONS.md", render_instructions),
        ("ROADMAP.md", render_roadmap),
    ):
        path = root / name
        if path.exists():
            continue
        path.write_text(render(now), encoding="utf-8")
        created.append(name)
    return created


def write_custom_instructions(
    root: Path,
    version: str,
    command: str,
    now: datetime | None = None,
) -> Path:
    """Write ``.cursor/custom-instructions.md``, replacing any previous copy."""
    cursor_dir = Path(root) / ".cursor"
    cursor_dir.mkdir(parents=True, exist_ok=True)
    action = "organized" if command == "projorg" else "initialized"
    path = cursor_dir / "custom-instructions.md"
    path.write_text(
        CUSTOM_INSTRUCTIONS.format(
            action=action,
            version=version,
            installed=iso_timestamp(now),
            command=command,
        ),
        encoding="utf-8",
    )
    return path
