"""Named templates for the two generated console.log artifacts.

Templates only read the GenerationModel; all enumeration and selector logic
lives in console_selectors.
"""
from __future__ import annotations

import re
from typing import Dict

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from console_selectors import GenerationError, GenerationModel

ARGS_FILE = "console_args.py"
SOL_FILE = "console.sol"
OUTPUTS = (ARGS_FILE, SOL_FILE)

GENERATED_NOTICE = "Code generated by console_gen.py; DO NOT EDIT."

_COMMENT_PREFIX = {
    ARGS_FILE: "#",
    SOL_FILE: "//",
}

__all__ = [
    "ARGS_FILE",
    "SOL_FILE",
    "OUTPUTS",
    "TEMPLATES",
    "header",
    "render",
    "render_all",
    "parse_address",
]

_ARGS_TEMPLATE = '''\
"""Selector table for console.log calls sent to ADDRESS."""

ADDRESS = "{{ model.address }}"

{% for ident, typ in model.arg_constants() %}
{{ ident }} = "{{ typ }}"
{% endfor %}

SELECTORS = {
{% for e in model.entries %}
    {{ e.selector_literal() }}: ({{ e.arg_types() | join(", ") }}{% if e.args | length == 1 %},{% endif %}),  # {{ e.sig }}
{% endfor %}
}
'''

_SOL_TEMPLATE = '''\
// SPDX-License-Identifier: MIT
pragma solidity >=0.4.22 <0.9.0;

library console {
    address constant CONSOLE_ADDRESS = {{ model.address }};

    function _sendLogPayload(bytes memory payload) private view {
        address consoleAddress = CONSOLE_ADDRESS;
        assembly {
            let payloadStart := add(payload, 32)
            let r := staticcall(gas(), consoleAddress, payloadStart, mload(payload), 0, 0)
        }
    }
{% for e in model.entries %}
{% if e.is_log_type %}

    function {{ e.log_type_signature() }} internal view {
        _sendLogPayload(abi.encodeWithSignature("{{ e.sig }}"{% if e.args %}, {{ e.params() }}{% endif %}));
    }
{% endif %}
{% if e.is_log %}

    function {{ e.log_signature() }} internal view {
        _sendLogPayload(abi.encodeWithSignature("{{ e.sig }}"{% if e.args %}, {{ e.params() }}{% endif %}));
    }
{% endif %}
{% endfor %}
}
'''

TEMPLATES: Dict[str, str] = {
    ARGS_FILE + ".j2": _ARGS_TEMPLATE,
    SOL_FILE + ".j2": _SOL_TEMPLATE,
}

_env = Environment(
    loader=DictLoader(TEMPLATES),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    autoescape=False,
)

_RE_ADDRESS = re.compile(r'ADDRESS = "?(0x[0-9a-fA-F]{40})\b')


def header(name: str) -> str:
    return f"{_COMMENT_PREFIX.get(name, '//')} {GENERATED_NOTICE}\n"


def render(name: str, model: GenerationModel, env: Environment = _env) -> str:
    """Render one output file (``console_args.py`` or ``console.sol``) to text."""
    try:
        tmpl = env.get_template(name + ".j2")
    except TemplateError as e:
        raise GenerationError(f"failed to parse template for {name}: {e}") from e
    try:
        body = tmpl.render(model=model)
    except TemplateError as e:
        raise GenerationError(f"failed to render {name}: {e}") from e
    return header(name) + body


def render_all(model: GenerationModel, env: Environment = _env) -> Dict[str, str]:
    """Render every output before anything is written."""
    return {name: render(name, model, env) for name in OUTPUTS}


def parse_address(name: str, text: str) -> str:
    """Read the console address constant back out of a rendered artifact."""
    m = _RE_ADDRESS.search(text)
    if not m:
        raise GenerationError(f"{name}: no address constant found")
    return m.group(1)
