"""Starter .editrecon.toml template."""

DEFAULT_TOML = """\
# editrecon configuration
version = "1.0"

[run]
wants_text_changes = true   # line-span edits; false = full buffers
apply_text_changes = false  # commit the result to the in-memory workspace

[output]
format = "terminal"         # terminal | json
show_summary = true

[workspace]
include = ["*"]
# exclude = ["build/*", "*.min.js"]
max_file_size_kb = 512
script_extensions = [".csx"]
# project_name = "app"

[actions]
# enable = ["whitespace", "custom/rename-foo"]   # empty = all enabled
# disable = ["newlines/normalize-line-endings"]
directory = ".editrecon-actions"
tab_size = 4
"""
