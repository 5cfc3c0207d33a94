import pathlib


def ensure_path(path: pathlib.Path):
    """
    Create the directory if missing. Raises NotADirectoryError when a file is in the way.
    """
    if path.is_dir():
        return
    if path.exists():
        raise NotADirectoryError(f"{path} exists and is not a directory")
    path.mkdir(parents=True)
