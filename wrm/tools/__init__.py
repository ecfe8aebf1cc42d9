"""wrm.tools package

Developer utilities (CI gate).

Keep this package's __init__ free of eager imports so `python -m wrm.tools.ci`
has no import-time side effects.
"""
