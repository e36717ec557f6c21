"""Periodic PARA core library — periodic-note rollups and task views.

Public API re-exports for convenient imports:
    from periodic_para import build_app, parse_period, extract_section, ...
"""

# Workspace & settings
from periodic_para.workspace import (
    vault_root,
    settings_path,
    load_settings,
)

# Durations
from periodic_para.duration import (
    parse_duration,
    add_durations,
    duration_percent,
    format_duration,
)

# Sections & periods
from periodic_para.section import extract_section
from periodic_para.periods import (
    parse_period,
    period_range,
    range_for_path,
    enumerate_subperiods,
    related_period_keys,
)

# Tags
from periodic_para.tags import (
    build_tag_predicate,
    has_common_prefix,
    normalize_tags,
)

# Documents
from periodic_para.vault import FileVault
from periodic_para.locator import DocumentLocator

# Engines
from periodic_para.aggregator import PeriodicAggregator
from periodic_para.task_filter import TaskTreeFilter
from periodic_para.task_index import VaultTaskIndex, parse_tasks

# Views
from periodic_para.views import ViewName, ViewRegistry, MarkdownTarget, SourceContext
from periodic_para.runtime import ParaApp, build_app

# Errors
from periodic_para.errors import (
    ParaError,
    UnrecognizedPeriod,
    MissingDocument,
    MissingIndexDocument,
    NoTagsDeclared,
    NoQueryBlockContent,
    UnknownViewName,
)

# Models
from periodic_para.models import (
    Granularity,
    Period,
    DateRange,
    Duration,
    DocumentRef,
    CollectionIndex,
    AggregationResult,
    TaskSection,
    TaskNode,
    TaskMode,
    TaskQuery,
    Settings,
)
