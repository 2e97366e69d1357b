from pathlib import Path


def ensure_log_dir(log_dir: str) -> Path:
    base = Path(log_dir)
    base.mkdir(parents=True, exist_ok=True)
    return base


def index_page_path(dist_dir: str, app_variant: str) -> Path:
    return Path(dist_dir) / f"{app_variant}.html"


def load_index_page(dist_dir: str, app_variant: str) -> bytes:
    """
    Read the prebuilt single-page client served at "/".

    The page is read once at startup; a missing build is a configuration error.
    """
    path = index_page_path(dist_dir, app_variant)
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError as exc:
        raise RuntimeError(f"Index page not found: {path}. Set APP or DIST_DIR.") from exc
