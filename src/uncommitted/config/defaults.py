"""Default configuration values and starter .uncommitted.toml template."""

CONFIG_FILENAME = ".uncommitted.toml"

DEFAULT_TOML = """\
# uncommitted configuration
version = "1.0"

[scan]
remote = "origin"         # remote checked for URL and cached remote-tracking refs
git_timeout = 10          # seconds before a single git query is abandoned
follow_symlinks = true    # symlinked directories are visited once each
skip_hidden = true        # do not descend into dot-directories

[output]
format = "terminal"       # terminal | json
width = 80                # frame width; long paths and filenames are truncated
show_summary = true
"""
