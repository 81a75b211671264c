# render.py
from markupsafe import escape

CONTAINER_ID = "messages"


def opacity(msg, now, evict_after):
    """Fade linearly from 1 at creation to 0 at eviction."""
    return 1 - msg.age(now) / evict_after


def render_message(msg, now, evict_after):
    return f"""<div
	id="{msg.id}"
	class="message"
	style="
		opacity:{opacity(msg, now, evict_after)};
		top:{msg.y}%;
		left:{msg.x}%;
		background:{msg.colour};
	"
	>
	{escape(msg.text)}
	</div>"""


def render_fragment(messages, now, evict_after):
    """Render the live messages as the full contents of the feed container."""
    body = "".join(render_message(m, now, evict_after) for m in messages)
    return f'<div id="{CONTAINER_ID}">{body}</div>'
