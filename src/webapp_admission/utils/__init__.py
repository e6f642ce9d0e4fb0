"""
Utils package - helper modules for admission validation.

Contains helper modules for:
- Building field paths and translating schema errors into field violations
- Parsing duration strings
"""
