"""Default configuration values and starter .qualitygate.toml template."""

DEFAULT_TOML = """\
# qualitygate configuration
version = "1.0"

[analysis]
parallelism = 4           # concurrent workers
timeout_seconds = 30      # deadline for the whole batch
max_file_size_kb = 512    # larger files are skipped

[cache]
enabled = true
directory = ".qualitygate/cache"

[rules]
# markup = ["HTML_UNCLOSED_TAG", "HTML_IMG_ALT"]   # empty = all enabled
# stylesheet = []
# script = []
# disable = ["JS_UNUSED_VARIABLE"]

[thresholds]
max_selectors = 50
max_complexity = 10
min_score = 70
"""
