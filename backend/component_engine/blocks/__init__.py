"""Page-section (block) classification built on subtree composition."""

from .composition import (
    SubtreeAnalysis,
    analyze,
    analyze_composition,
    characteristics,
    cluster_rows,
    detect_layout_pattern,
)
from .integration import BlockAnalysis, BlockStatistics, analyze_block, block_statistics
from .pipeline import (
    GENERIC_BLOCK_TYPE,
    BlockClassifier,
    build_block_pipeline,
    classify_block,
    default_block_classifier,
    is_block_candidate,
    subtype_to_readable,
)
from .schemas import (
    BlockSchema,
    BlockSlot,
    get_block_schema,
    get_block_schema_by_type,
    get_block_schemas,
    get_block_schemas_by_category,
    load_block_schemas,
    parse_block_schemas,
)
from .scorers import BLOCK_SCORERS, BlockFacts, BlockVerdict, block_scorer

__all__ = [
    "BLOCK_SCORERS",
    "BlockAnalysis",
    "BlockClassifier",
    "BlockFacts",
    "BlockSchema",
    "BlockSlot",
    "BlockStatistics",
    "BlockVerdict",
    "GENERIC_BLOCK_TYPE",
    "SubtreeAnalysis",
    "analyze",
    "analyze_block",
    "analyze_composition",
    "block_scorer",
    "block_statistics",
    "build_block_pipeline",
    "characteristics",
    "classify_block",
    "cluster_rows",
    "default_block_classifier",
    "detect_layout_pattern",
    "get_block_schema",
    "get_block_schema_by_type",
    "get_block_schemas",
    "get_block_schemas_by_category",
    "is_block_candidate",
    "load_block_schemas",
    "parse_block_schemas",
    "subtype_to_readable",
]
