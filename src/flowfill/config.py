""" Any global variables are stored here"""
import asyncio
from typing import TYPE_CHECKING, Any

import aiohttp
import jinja2

from .types import Color

# fmt: off
g: dict[str, Any] = {
    # User settable
    "lo": 1,                        # float, smallest element height tried (in px)
    "hi": 100_000,                  # float, an element height that is definitely too big
    "tol": 1,                       # float, sub-pixel differences aren't visible
    "fallback_height": 2,           # float, used if the height search fails
    "spacing": 10,                  # float, default spacing used by the cli
    "row_align": "center",          # left | right | center | justify
    "bg_color": Color("white"),     # Color
    "poll_interval": 0.05,          # float in s
    "load_timeout": 30,             # float in s, None waits forever
}

# We avoid circular references by using if TYPE_CHECKING
if TYPE_CHECKING:
    from flowfill.utils.aio import Task
tasks: "list[Task]" = []
jinja_env: jinja2.Environment                   # The global jinja Environment used for html rendering
aiosession: aiohttp.ClientSession               # The global aiohttp session used for http requests
event_loop: asyncio.AbstractEventLoop | None = None  # The global asyncio event loop

# fmt: on

################################ constant data ########################

# the rows are vertically centered as a block
layout_template = """\
<div style="width: 100%; height: 100%; position: relative;">
  <div style="position: absolute; top: 50%; transform: translateY(-50%); width: 100%;">
  {%- for row in rows %}
    {{ row }}
  {%- endfor %}
  </div>
</div>"""

row_template = """\
<div style="display: flex; flex-direction: row; justify-content: {{ justify }};">
  {%- for item in items %}
  {{ item }}
  {%- endfor %}
</div>"""

spacer_template = """<div style="width: {{ size }}px; height: {{ size }}px; visibility: hidden;"></div>"""

page_template = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
</head>
<body style="margin: 0; background-color: {{ bg_color }};">
  <div style="width: {{ width }}px; height: {{ height }}px;">
  {{ content }}
  </div>
</body>
</html>
"""

# css justify-content for every row alignment
justify_content = {
    "left": "flex-start",
    "right": "flex-end",
    "center": "center",
    "justify": "space-between",
}
