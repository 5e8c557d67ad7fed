"""
Pure data model of the throttle curve editor: points, interpolation,
coordinate mapping, deadzone and firmware export. Nothing here imports Qt.
"""
