"""
Preprocessing Context

Responsibilities:
- Owns the ResumeRecord data model and its normalization from raw AI output
- Decides compact mode, global scale and per-section font sizes
- Caps list lengths, relocates overflowing entries into achievements
- Truncates long bullets and attaches layout hints for rendering

Owns: Resume record shape, content caps, overflow relocation
Never: Renders markup or talks to the structuring model
"""
