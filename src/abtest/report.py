"""
Plain-text registry summary rendered with Jinja2.

Lists every registered experiment with its status and group and, when an
activation log is supplied, how many activations each group received.
"""

import logging
from typing import Optional

from jinja2 import Environment, StrictUndefined

from .activation_log import ActivationLog
from .manager import describe_helper

logger = logging.getLogger(__name__)

SUMMARY_TEMPLATE = """\
Registered experiments: {{ experiments|length }}
Helper: {{ helper }}
{% for exp in experiments %}
- {{ exp.id }} [{{ exp.status }}] group={{ exp.group }}{% if exp.description %} ({{ exp.description }}){% endif %}

{% endfor %}
{% if activations is not none %}
Activations:
{% for experiment_id, counts in activations.items() %}
- {{ experiment_id }}: {% for group, n in counts.items() %}group {{ group }}={{ n }}{% if not loop.last %}, {% endif %}{% endfor %}

{% else %}
- none recorded
{% endfor %}
{% endif %}
"""

_env = Environment(trim_blocks=True, lstrip_blocks=True, undefined=StrictUndefined)


def render_registry_summary(manager, activation_log: Optional[ActivationLog] = None) -> str:
    """
    Render a summary of the manager's registry.

    Args:
        manager: Manager whose registry is summarised
        activation_log: Optional log to include per-group activation counts

    Returns:
        Rendered text
    """
    template = _env.from_string(SUMMARY_TEMPLATE)
    text = template.render(
        experiments=manager.list_experiments(),
        helper=describe_helper(manager.helper),
        activations=activation_log.summary() if activation_log is not None else None,
    )
    logger.debug(f"Rendered registry summary for {len(manager.register)} experiments")
    return text
