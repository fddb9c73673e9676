#!/usr/bin/env python3
# menuconsole/commands/parser.py
from __future__ import annotations

"""
Argument binding helpers for commands.

Responsibilities:
- Bind word lists to a callable signature with type coercion based on annotations.
- Inject the execution context into callbacks declaring a `ctx` parameter.
- Render compact Usage strings from a function signature.

Accepted argument forms:
    value          positional
    key=value      keyword (or positional-or-keyword) parameter
    --key=value    same as key=value
    --flag         boolean parameter set to True ('--no-flag' sets False)
"""

import inspect
from typing import Any, get_args, get_origin

# Name of the parameter receiving the execution context.
CONTEXT_PARAM = "ctx"

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}


def _coerce_value(text_value: str, annotation: Any) -> Any:
    """
    Convert a string to the annotated type when reasonable.

    Supported coercions:
        - str/Any/inspect._empty -> original text
        - bool -> accepts '1,true,yes,y,on' (case-insensitive)
        - int/float -> cast via constructor
        - Optional[X] -> coerced as X
    """
    origin = get_origin(annotation)
    if origin is not None and type(None) in get_args(annotation):
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            annotation = members[0]

    if annotation in (inspect._empty, str, Any):
        return text_value
    if annotation is bool:
        return text_value.lower() in _BOOL_TRUE
    if annotation in (int, float):
        try:
            return annotation(text_value)
        except ValueError:
            raise TypeError(
                f"Expected {annotation.__name__}, got: {text_value!r}") from None
    # Fallback to original text for any other type
    return text_value


def _signature(func: Any) -> inspect.Signature:
    """Signature with string annotations (PEP 563) resolved when possible."""
    try:
        return inspect.signature(func, eval_str=True)
    except (NameError, TypeError, SyntaxError):
        return inspect.signature(func)


def _split_keywords(tokens: list[str]) -> tuple[list[str], dict[str, str | bool]]:
    positional_tokens: list[str] = []
    kw_tokens_raw: dict[str, str | bool] = {}
    for token in tokens:
        if token.startswith("--") and len(token) > 2:
            body = token[2:]
            if "=" in body:
                key, value = body.split("=", 1)
                kw_tokens_raw[key.replace("-", "_")] = value
            elif body.startswith("no-"):
                kw_tokens_raw[body[3:].replace("-", "_")] = False
            else:
                kw_tokens_raw[body.replace("-", "_")] = True
        elif "=" in token and not token.startswith("="):
            key, value = token.split("=", 1)
            kw_tokens_raw[key.replace("-", "_")] = value
        else:
            positional_tokens.append(token)
    return positional_tokens, kw_tokens_raw


def _coerce_keyword(name: str, raw: str | bool, annotation: Any) -> Any:
    if isinstance(raw, bool):
        # bare --flag / --no-flag only make sense for booleans
        members = get_args(annotation) if get_origin(annotation) is not None else (annotation,)
        if not any(m in (inspect._empty, Any, bool, "bool") for m in members):
            raise TypeError(f"Option --{name.replace('_', '-')} expects a value.")
        return raw
    return _coerce_value(raw, annotation)


def bind_args(func: Any, tokens: list[str], *, ctx: Any = None) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """
    Bind a flat token list to the signature of `func`.

    Supports:
        - positional tokens
        - key=value / --key=value / --flag tokens for keyword parameters
        - *args (VAR_POSITIONAL) with optional element annotation via typing.Tuple[T, ...]
        - a `ctx` parameter, always bound to the execution context

    Raises TypeError on missing, extra or badly typed arguments.
    """
    signature = _signature(func)
    parameters = list(signature.parameters.values())

    positional_tokens, kw_tokens_raw = _split_keywords(tokens)
    known = {p.name for p in parameters
             if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD) and p.name != CONTEXT_PARAM}
    accepts_var_kw = any(p.kind is p.VAR_KEYWORD for p in parameters)
    unknown = [k for k in kw_tokens_raw if k not in known]
    if unknown and not accepts_var_kw:
        raise TypeError(f"Unknown option: {unknown[0].replace('_', '-')}")

    bound_positional: list[Any] = []
    bound_keywords: dict[str, Any] = {}
    positional_index = 0
    var_positional_name: str | None = None
    var_positional_annotation: Any = inspect._empty
    # once a positional-or-keyword parameter is given by name, later ones must be too
    keyword_mode = False

    # First pass: positional parameters and detection of *args
    for parameter in parameters:
        if parameter.name == CONTEXT_PARAM and parameter.kind is not parameter.VAR_POSITIONAL:
            if parameter.kind is parameter.KEYWORD_ONLY or keyword_mode:
                bound_keywords[CONTEXT_PARAM] = ctx
            else:
                bound_positional.append(ctx)
            continue

        if parameter.kind is parameter.VAR_POSITIONAL:
            var_positional_name = parameter.name
            var_positional_annotation = parameter.annotation
            continue

        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            if parameter.name in kw_tokens_raw and parameter.kind is parameter.POSITIONAL_OR_KEYWORD:
                # bound by keyword in the last pass
                keyword_mode = True
                continue
            if positional_index < len(positional_tokens):
                value = _coerce_value(
                    positional_tokens[positional_index], parameter.annotation)
                if keyword_mode:
                    bound_keywords[parameter.name] = value
                else:
                    bound_positional.append(value)
                positional_index += 1
            elif parameter.default is not inspect._empty:
                if not keyword_mode:
                    bound_positional.append(parameter.default)
            else:
                raise TypeError(f"Missing required argument: {parameter.name}")
        elif parameter.kind is parameter.KEYWORD_ONLY:
            if parameter.name in kw_tokens_raw:
                bound_keywords[parameter.name] = _coerce_keyword(
                    parameter.name, kw_tokens_raw[parameter.name], parameter.annotation)
            elif parameter.default is inspect._empty:
                raise TypeError(
                    f"Missing required keyword-only argument: {parameter.name}")

    # Pack remaining positionals into *args
    if var_positional_name is not None:
        remaining = positional_tokens[positional_index:]
        element_annotation: Any = str
        origin = get_origin(var_positional_annotation)
        args_ = get_args(var_positional_annotation) or ()
        if origin is tuple and args_:
            element_annotation = args_[0]
        elif var_positional_annotation is not inspect._empty and origin is None:
            element_annotation = var_positional_annotation

        bound_positional.extend(_coerce_value(item, element_annotation) for item in remaining)
        positional_index = len(positional_tokens)
    elif positional_index < len(positional_tokens):
        raise TypeError("Too many positional arguments.")

    # Keywords given for positional-or-keyword parameters, and **kwargs
    for parameter in parameters:
        if parameter.kind is parameter.POSITIONAL_OR_KEYWORD and parameter.name in kw_tokens_raw:
            bound_keywords[parameter.name] = _coerce_keyword(
                parameter.name, kw_tokens_raw[parameter.name], parameter.annotation)
    if accepts_var_kw:
        for key in unknown:
            bound_keywords[key] = kw_tokens_raw[key]

    return tuple(bound_positional), bound_keywords


def build_usage(command_name: str, func: Any) -> str:
    """
    Render a compact usage string based on `func` signature.

    Examples:
        'scan <host> [port] [--timeout=...] [args...]'
    """
    signature = _signature(func)
    usage_parts: list[str] = []

    for parameter in signature.parameters.values():
        if parameter.name == CONTEXT_PARAM or parameter.kind is parameter.VAR_KEYWORD:
            continue
        if parameter.kind is parameter.VAR_POSITIONAL:
            usage_parts.append(f"[{parameter.name}...]")
            continue

        option = parameter.name.replace("_", "-")
        if parameter.kind is parameter.KEYWORD_ONLY:
            token = f"[--{option}]" if parameter.annotation in (bool, "bool") else f"[--{option}=...]"
        elif parameter.default is inspect._empty:
            token = f"<{parameter.name}>"
        else:
            token = f"[{parameter.name}]"
        usage_parts.append(token)

    return f"{command_name} " + " ".join(usage_parts) if usage_parts else command_name
