import os

# Render matplotlib thumbnails without a display
os.environ.setdefault("MPLBACKEND", "Agg")
