import os
import time


def _directive_text(context):
    parts = []
    sort = context.get("sort")
    if sort is not None:
        parts.append(f"sort {sort.field} {sort.direction}")
    flt = context.get("filter")
    if flt is not None:
        parts.append(f"filter {flt.field}~'{flt.value}'")
    hidden = context.get("hidden") or ()
    if hidden:
        parts.append(f"{len(hidden)} hidden")
    return ", ".join(parts)


def render_status(context, width):
    """
    context keys: status_msg, status_until, focus, editing, file_path,
                   record_count, matched_count, sort, filter, hidden
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        focus = context.get("focus", 0)
        if focus == 1:
            mode = "CMD"
        elif context.get("editing"):
            mode = "EDIT"
        else:
            mode = "GRID"
        fname = context.get("file_path") or ""
        if fname:
            fname = os.path.basename(fname)
        records = context.get("record_count", 0)
        matched = context.get("matched_count", records)
        counts = f"{records} records" if matched == records else f"{matched}/{records} records"
        pieces = [mode, fname, counts]
        directives = _directive_text(context)
        if directives:
            pieces.append(directives)
        text = " " + " | ".join(p for p in pieces if p)

    return text.ljust(width)[:width]


def render_formula(address, value, width):
    text = f" {address or '':<6} fx {value or ''}"
    return text.ljust(width)[:width]
