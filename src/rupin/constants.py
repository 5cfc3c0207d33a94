import os
import pathlib

rupin_data_dir = pathlib.Path(os.environ.get("RUPIN_DATA_DIR", pathlib.Path.home() / ".rupin"))
rupin_cache_dir = pathlib.Path(os.environ.get("RUPIN_CACHE_DIR", rupin_data_dir / "cache"))
rupin_dist_cache_dir = rupin_cache_dir / "dist"

rustup_home = pathlib.Path(os.environ.get("RUSTUP_HOME", pathlib.Path.home() / ".rustup"))

dist_server = os.environ.get("RUPIN_DIST_SERVER", "https://static.rust-lang.org").rstrip("/")
dist_timeout_seconds = 30

# Number of days the nearest-build scan looks back from its start date
default_lookback_days = 31

# Always-present base components; never suggested for `rustup component add`
required_components = ("rustc", "cargo", "rust-std")

# Prefixes of packages rustup lists once per added target
cross_target_packages = ("rust-std-", "rust-analysis-")

# Descriptor shipped inside every installed toolchain
bundled_manifest_name = "multirust-channel-manifest.toml"
