"""
emis-party: parties, roles and permissions for disaster management.
"""

from importlib.metadata import PackageNotFoundError, metadata

__version__ = "0.1.0"

DISTRIBUTION = "emis-party"


def get_info() -> dict:
    """Package metadata exposed on the root endpoint"""
    try:
        meta = metadata(DISTRIBUTION)
    except PackageNotFoundError:
        return {"name": DISTRIBUTION, "version": __version__}
    urls = dict(url.split(", ", 1) for url in meta.get_all("Project-URL") or [])
    info = {
        "name": meta["Name"],
        "description": meta["Summary"],
        "version": meta["Version"],
        "license": meta.get("License-Expression") or meta.get("License"),
        "contributors": [
            author.strip()
            for header in meta.get_all("Author-email") or []
            for author in header.split(",")
            if author.strip()
        ],
    }
    # Links are only reported when the distribution declares them
    for key, label in (("homepage", "Homepage"), ("repository", "Repository"), ("bugs", "Issues")):
        if urls.get(label):
            info[key] = urls[label]
    return info
