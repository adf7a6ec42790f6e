"""regionfx — region-driven ffmpeg effect planning.

Compile time-anchored effect regions (zoom/pan, crop, trim, annotations,
background compositing) into ffmpeg filter expressions and an ordered
list of ffmpeg invocations. Configs are declared in YAML or JSON files.
"""
