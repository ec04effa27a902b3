import re

_HEADING_MARKS = re.compile(r'###\s*')
_BOLD_MARKS = re.compile(r'\*\*')
_BULLETS = re.compile(r'^[-*]\s*', re.MULTILINE)
_ACTIVITY_CATEGORY = re.compile(r'([A-Za-z]+\s+Activities:)')
_EXTRA_NEWLINES = re.compile(r'\n{3,}')


def clean_response_text(text: str) -> str:
    """Flatten markdown emphasis into the plain bullet style the chat UI renders."""
    cleaned = _HEADING_MARKS.sub('', text)
    cleaned = _BOLD_MARKS.sub('', cleaned)
    cleaned = _BULLETS.sub('• ', cleaned)
    cleaned = _ACTIVITY_CATEGORY.sub(r'\n\1', cleaned)
    cleaned = _EXTRA_NEWLINES.sub('\n\n', cleaned)
    return cleaned.strip()
