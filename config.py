"""
Semantic Nebula Configuration
Central configuration for paths, defaults, and tuning constants.
"""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"
CACHE_DIR = PROJECT_ROOT / "cache"

# Corpus
CORPUS_TEXT_PATH = DATA_DIR / "corpus.txt"
CUSTOM_ITEMS_PATH = DATA_DIR / "custom_items.csv"
MAX_CORPUS_ITEMS = 600
SOURCE_CORPUS = "corpus"
SOURCE_CUSTOM = "custom"
DEFAULT_DATASET = "lines"

# Embedding settings
DEFAULT_EMBEDDER = "openai"
OPENAI_MODEL = "text-embedding-3-small"
OPENAI_EMBEDDING_DIM = 1536
OPENAI_BATCH_SIZE = 600  # Max texts per API call
OPENAI_MAX_RETRIES = 5
OPENAI_RETRY_DELAY = 2.0  # Seconds; doubles after each rate-limited attempt

# UMAP settings
UMAP_N_NEIGHBORS = 45
UMAP_MIN_DIST = 0.35
UMAP_METRIC = "cosine"
UMAP_RANDOM_STATE = 42

# Point creation
POINT_RNG_SEED = 7
DEPTH_MIN = 0.06
SEED_RANGE = 10000.0

# Layout (pixels unless noted)
VIEW_MARGIN = 14
VIEW_TOP_INSET = 0
VIEW_BOTTOM_INSET = 0
LAYOUT_PAD = 0.03  # fraction of the target rect
RELAX_ITERS = 22
RELAX_RADIUS = 28.0
RELAX_STRENGTH = 0.06
GEOMETRY_EPS = 1e-9

# Search
TOP_K = 25

# Camera
ZOOM_MIN = 1.0
ZOOM_MAX = 2.8
CAM_LERP = 0.12
WHEEL_ZOOM_SPEED = 0.0016
FOCUS_TOP_M = 120
FOCUS_WEIGHT_POWER = 3.2
FOCUS_WEIGHT_FLOOR = 1e-4
VIEW_RADIUS_FRACTION = 0.22
SPREAD_EPS = 1e-6

# Render / interaction
JITTER = 22.0
DRIFT = 0.75
DRIFT_RATE = 0.24  # noise units per second (0.004 per frame at 60 fps)
PARALLAX = 26.0
NEUTRAL_INTENSITY = 0.22
SIZE_MIN = 0.9
SIZE_MAX = 12.5
SIZE_POWER = 2.9
RANK_EMPHASIS = 120
RANK_SCALE_TOP = 1.45
RANK_SCALE_BOTTOM = 0.55
RANK_SCALE_REST = 0.5
HIT_RADIUS_MIN = 7.0
HIT_RADIUS_SCALE = 1.8
FRAME_DT = 1.0 / 60.0

# Visualization settings
PLOT_HEIGHT = 640
PLOT_WIDTH = 960
HOVER_TEXT_MAX = 170
MATCH_LINE_MAX = 140
MAX_ANIMATION_FRAMES = 60
SETTLE_FOCUS_PX = 0.5  # Transition stops once focus is this close (layout px)
SETTLE_ZOOM = 1e-2  # Zoom gap at which a transition stops

# Logging
LOG_LEVEL = "INFO"
