"""Shared test fixtures for Periodic PARA tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml


def write_note(root: Path, rel: str, text: str, tags: list[str] | str | None = None) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if tags is not None:
        text = "---\n" + yaml.dump({"tags": tags}, default_flow_style=False) + "---\n" + text
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Create a temporary vault with periodic notes and PARA folders."""
    root = tmp_path / "vault"
    root.mkdir()

    # Daily notes
    write_note(root, "PeriodicNotes/2024/Daily/2024-01-01.md", """# Project List
1. [[Alpha.README|Alpha]] 1hr30
2. [[Beta.README|Beta]] 0hr45
2hr15

# Habit
- [x] Morning run ✅ 2024-01-01
    - [x] Stretch ✅ 2024-01-01

# Log
- [x] Write report ✅ 2024-01-01
- [ ] Plan week
    - [x] Draft outline ✅ 2024-01-02
""")
    write_note(root, "PeriodicNotes/2024/Daily/2024-01-02.md", """# Project List
1. [[Alpha.README|Alpha]] 1hr
1hr

# Log
- [ ] Call dentist
""")
    write_note(root, "PeriodicNotes/2024/Daily/2024-02-10.md", """# Project List
1. [[Beta.README|Beta]] 3hr
3hr
# Log
""")

    # Weekly / quarterly / yearly notes
    write_note(root, "PeriodicNotes/2024/Weekly/2024-W01.md", """# Weekly goals
- [ ] Weekly review
""")
    write_note(root, "PeriodicNotes/2024/Quarterly/2024-Q1.md", """# First Things Dimension
1. [[Health.README|Health]]
2. [[Career.README|Career]] 10hr

# Review
""")
    write_note(root, "PeriodicNotes/2024/Quarterly/2024-Q2.md", """# First Things Dimension
1. [[Health.README|Health]]
2. [[Family.README|Family]]
# Review
""")
    write_note(root, "PeriodicNotes/2024/2024.md", """# 2024

```PeriodicPARA
AreaListByTime
```
""")

    # PARA folders
    write_note(root, "1. Projects/Alpha/Alpha.README.md", """# Alpha
- [ ] Ship alpha #urgent
- [x] Kickoff ✅ 2023-12-20
""", tags=["work/alpha"])
    write_note(root, "1. Projects/Beta/Beta.README.md", "# Beta\n- [ ] Beta task\n", tags="work2")
    write_note(root, "1. Projects/Gamma/notes.md", "# Gamma has no README\n")
    write_note(root, "2. Areas/Health/Health.README.md", "# Health\n", tags=["life"])
    write_note(root, "2. Areas/Career/Career.README.md", "# Career\n", tags=["work"])
    write_note(root, "2. Areas/Family/Family.README.md", "# Family\n", tags=["life/family"])
    write_note(root, "3. Resources/Python/README.md", "# Python\n", tags=["work/learning"])

    # Topic notes and templates
    write_note(root, "Topics/Work.md", """# Work

```PeriodicPARA
TaskListByTag
```

- [ ] Topic task
""", tags=["work"])
    write_note(root, "Topics/Untagged.md", "```periodic-para\nProjectListByTag\n```\n")
    write_note(root, "Templates/Task template.md", "- [ ] Template task\n", tags=["work"])

    # Settings (only some keys; the rest use defaults)
    write_note(root, ".periodic-para/settings.yaml", yaml.dump({"habitHeader": "Habit"}))

    os.environ["PARA_VAULT_ROOT"] = str(root)
    yield root
    # Cleanup
    if "PARA_VAULT_ROOT" in os.environ:
        del os.environ["PARA_VAULT_ROOT"]


@pytest.fixture
def para(vault: Path):
    from periodic_para import build_app

    return build_app(vault)
