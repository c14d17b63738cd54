"""Render prompt templates.

A template is plain text mixed with ``{...}`` expressions:

- ``{var}`` is replaced with the value of ``var``;
- ``{?var <template>}`` renders ``template`` when ``var`` is truthy;
- ``{!var <template>}`` renders ``template`` when ``var`` is falsy.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass
class _Text:
    value: str


@dataclass
class _Variable:
    name: str


@dataclass
class _Block:
    when_true: bool
    name: str
    body: list = field(default_factory=list)


_Expr = _Text | _Variable | _Block


def render_prompt(template: str, variables: Mapping[str, str]) -> str:
    """Render ``template`` using ``variables``."""
    return _eval(_parse_template(template), variables)


def _parse_template(template: str) -> list[_Expr]:
    exprs: list[_Expr] = []
    current: list[str] = []
    depth = 0

    def flush_text() -> None:
        if current:
            exprs.append(_Text("".join(current)))
            current.clear()

    for ch in template:
        if depth:
            if ch == "}":
                depth -= 1
                if depth == 0:
                    if current:
                        exprs.append(_parse_block("".join(current)))
                        current.clear()
                else:
                    current.append(ch)
            else:
                if ch == "{":
                    depth += 1
                current.append(ch)
        elif ch == "{":
            depth = 1
            flush_text()
        else:
            current.append(ch)
    flush_text()
    return exprs


def _parse_block(value: str) -> _Expr:
    name, sep, tail = value.partition(" ")
    if not sep:
        return _Variable(value)
    if name.startswith("?"):
        return _Block(True, name[1:], _parse_template(tail))
    if name.startswith("!"):
        return _Block(False, name[1:], _parse_template(tail))
    return _Text(f"{{{value}}}")


def _truthy(value: str) -> bool:
    return value not in ("", "0", "false")


def _eval(exprs: list[_Expr], variables: Mapping[str, str]) -> str:
    output: list[str] = []
    for expr in exprs:
        if isinstance(expr, _Text):
            output.append(expr.value)
        elif isinstance(expr, _Variable):
            output.append(variables.get(expr.name, ""))
        elif _truthy(variables.get(expr.name, "")) == expr.when_true:
            output.append(_eval(expr.body, variables))
    return "".join(output)