"""
Renderings of a collection: markdown, a Word-compatible HTML document, a
mind-map outline and per-case copy text.

Markdown field lines are `- <label>：<value>` with backslashes and line breaks
escaped, so `read_markdown_fields` can read every scalar field back exactly.
"""
from __future__ import annotations

import html
import os
import re
from typing import Dict, List, Optional, Tuple

from collab_hunter.common.artifacts import export_filename, get_current_date_string, save_text_artifact
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.models.notebooks import Collection
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.trend_outputs import TrendItem

logger = get_logger(__name__)

FULLWIDTH_COLON = "："

# (field, label) in render order
CASE_FIELD_LABELS: List[Tuple[str, str]] = [
    ("projectName", "项目概述"),
    ("date", "项目时间"),
    ("brandName", "品牌"),
    ("productName", "涉及产品"),
    ("partnerIntro", "合作品牌"),
    ("industry", "所属行业"),
    ("visualStyle", "视觉风格"),
    ("campaignSlogan", "宣传口号"),
    ("impactResult", "市场反响"),
    ("keyVisualUrl", "主视觉"),
    ("platformSource", "信息来源"),
    ("insight", "案例洞察"),
]

TREND_FIELD_LABELS: List[Tuple[str, str]] = [
    ("ipName", "IP 名称"),
    ("category", "类别"),
    ("reason", "走红原因"),
    ("targetAudience", "目标受众"),
    ("momentum", "热度阶段"),
    ("commercialValue", "商业价值"),
]

RIGHTS_LABEL = "联名权益"
LINKS_LABEL = "参考链接"
BUZZWORDS_LABEL = "热门关键词"
COMPATIBILITY_LABEL = "适配品类"
NO_LINKS = "无"

EXPORT_FORMATS = {
    "markdown": ("md", ""),
    "html": ("doc", ""),
    "mindmap": ("txt", "mindmap"),
}

_LABEL_TO_FIELD: Dict[str, str] = {label: field for field, label in CASE_FIELD_LABELS + TREND_FIELD_LABELS}
_FIELD_LINE_RE = re.compile(r"^- (?P<label>[^：\n]+)：(?P<value>.*)$")
_UNESCAPE_RE = re.compile(r"\\(.)")
_UNESCAPES = {"n": "\n", "r": "\r", "\\": "\\"}


def escape_field(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


def unescape_field(value: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), value)


def _field_lines(record, labels: List[Tuple[str, str]]) -> List[str]:
    lines = []
    for field, label in labels:
        value = getattr(record, field)
        if value is None or value == "":
            continue
        lines.append(f"- {label}{FULLWIDTH_COLON}{escape_field(str(value))}")
    return lines


def _collection_summary(collection: Collection) -> str:
    if collection.is_report:
        return f"> 趋势报告 | 趋势数：{len(collection.trends)} | 导出日期：{get_current_date_string()}"
    return f"> 案例笔记本 | 案例数：{len(collection.cases)} | 导出日期：{get_current_date_string()}"


# ------------------------------------------------------------------
# Markdown
# ------------------------------------------------------------------

def _case_section(index: int, case: Case) -> str:
    lines = [f"## {index}. {escape_field(case.projectName)}", ""]
    lines.extend(_field_lines(case, CASE_FIELD_LABELS))
    lines.extend(["", f"**{RIGHTS_LABEL}**", ""])
    for i, right in enumerate(case.rights, start=1):
        lines.append(f"{i}. **{escape_field(right.title)}**{FULLWIDTH_COLON}{escape_field(right.description)}")
    lines.extend(["", f"**{LINKS_LABEL}**", ""])
    if case.sourceUrls:
        lines.extend(f"- <{url}>" for url in case.sourceUrls)
    else:
        lines.append(NO_LINKS)
    return "\n".join(lines)


def _trend_section(index: int, trend: TrendItem) -> str:
    lines = [f"## {index}. {escape_field(trend.ipName)}", ""]
    lines.extend(_field_lines(trend, TREND_FIELD_LABELS))
    if trend.buzzwords:
        lines.append(f"- {BUZZWORDS_LABEL}{FULLWIDTH_COLON}{escape_field('、'.join(trend.buzzwords))}")
    if trend.compatibility:
        lines.append(f"- {COMPATIBILITY_LABEL}{FULLWIDTH_COLON}{escape_field('、'.join(trend.compatibility))}")
    return "\n".join(lines)


def to_markdown(collection: Collection) -> str:
    parts = [f"# {escape_field(collection.name)}", "", _collection_summary(collection)]
    if collection.is_report:
        sections = [_trend_section(i, t) for i, t in enumerate(collection.trends, start=1)]
    else:
        sections = [_case_section(i, c) for i, c in enumerate(collection.cases, start=1)]
    for section in sections:
        parts.extend(["", "---", "", section])
    return "\n".join(parts) + "\n"


def read_markdown_fields(markdown: str) -> List[Dict[str, str]]:
    """
    Read the scalar fields of every `## ` section back from `to_markdown` output.

    Returns one dict per case/trend keyed by field name. Rights and links are
    list-valued and are not read back.
    """
    records: List[Dict[str, str]] = []
    current: Optional[Dict[str, str]] = None
    for line in markdown.split("\n"):
        if line.startswith("## "):
            current = {}
            records.append(current)
            continue
        if current is None:
            continue
        match = _FIELD_LINE_RE.match(line)
        if not match:
            continue
        field = _LABEL_TO_FIELD.get(match.group("label"))
        if field and field not in current:
            current[field] = unescape_field(match.group("value"))
    return records


# ------------------------------------------------------------------
# Per-case copy text
# ------------------------------------------------------------------

def case_to_markdown(case: Case) -> str:
    rights = "\n".join(f"  {i}. {r.title}{FULLWIDTH_COLON}{r.description}" for i, r in enumerate(case.rights, start=1))
    links = "\n".join(f"<{url}>" for url in case.sourceUrls) if case.sourceUrls else NO_LINKS
    return (
        f"项目概述：{case.projectName}\n"
        f"项目时间：{case.date}\n"
        f"涉及产品：{case.productName}\n"
        f"合作品牌：{case.partnerIntro}\n"
        f"信息来源：{case.platformSource}\n"
        f"联名权益：\n{rights}\n"
        f"案例洞察：{case.insight}\n"
        f"参考链接：\n{links}"
    )


def case_to_plain_text(case: Case) -> str:
    """Clipboard text without any markdown syntax."""
    rights = "\n".join(f"{i}. {r.title}：{r.description}" for i, r in enumerate(case.rights, start=1))
    links = "\n".join(case.sourceUrls) if case.sourceUrls else NO_LINKS
    lines = [
        f"项目概述：{case.projectName}",
        f"项目时间：{case.date}",
        f"涉及产品：{case.productName}",
        f"合作品牌：{case.partnerIntro}",
        f"信息来源：{case.platformSource}",
        "联名权益：",
        rights,
        f"案例洞察：{case.insight}",
        "参考链接：",
        links,
    ]
    return "\n".join(lines)


# ------------------------------------------------------------------
# HTML (opens in Word)
# ------------------------------------------------------------------

_HTML_STYLE = """
body { font-family: "Microsoft YaHei", "PingFang SC", Arial, sans-serif; color: #1e293b; line-height: 1.6; }
h1 { color: #b5004a; border-bottom: 2px solid #b5004a; padding-bottom: 6px; }
h2 { color: #0f172a; margin-top: 28px; }
.meta { color: #64748b; font-size: 12px; }
.label { font-weight: bold; color: #475569; }
.rights li { margin-bottom: 4px; }
a { color: #2563eb; }
""".strip()


def _e(value: Optional[str]) -> str:
    return html.escape(value or "")


def _html_field_rows(record, labels: List[Tuple[str, str]]) -> List[str]:
    rows = []
    for field, label in labels:
        value = getattr(record, field)
        if value is None or value == "":
            continue
        rows.append(f'<p><span class="label">{_e(label)}：</span>{_e(str(value))}</p>')
    return rows


def _html_case(index: int, case: Case) -> str:
    parts = [f"<h2>{index}. {_e(case.projectName)}</h2>"]
    parts.extend(_html_field_rows(case, CASE_FIELD_LABELS))
    parts.append(f'<p class="label">{RIGHTS_LABEL}</p><ol class="rights">')
    parts.extend(f"<li><b>{_e(r.title)}</b>：{_e(r.description)}</li>" for r in case.rights)
    parts.append("</ol>")
    parts.append(f'<p class="label">{LINKS_LABEL}</p>')
    if case.sourceUrls:
        parts.append("<ul>")
        parts.extend(f'<li><a href="{_e(url)}">{_e(url)}</a></li>' for url in case.sourceUrls)
        parts.append("</ul>")
    else:
        parts.append(f"<p>{NO_LINKS}</p>")
    return "\n".join(parts)


def _html_trend(index: int, trend: TrendItem) -> str:
    parts = [f"<h2>{index}. {_e(trend.ipName)}</h2>"]
    parts.extend(_html_field_rows(trend, TREND_FIELD_LABELS))
    if trend.buzzwords:
        parts.append(f'<p><span class="label">{BUZZWORDS_LABEL}：</span>{_e("、".join(trend.buzzwords))}</p>')
    if trend.compatibility:
        parts.append(f'<p><span class="label">{COMPATIBILITY_LABEL}：</span>{_e("、".join(trend.compatibility))}</p>')
    return "\n".join(parts)


def to_html(collection: Collection) -> str:
    if collection.is_report:
        body = [_html_trend(i, t) for i, t in enumerate(collection.trends, start=1)]
    else:
        body = [_html_case(i, c) for i, c in enumerate(collection.cases, start=1)]
    summary = _collection_summary(collection).lstrip("> ")
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f"<title>{_e(collection.name)}</title>"
        f"<style>\n{_HTML_STYLE}\n</style></head>\n"
        "<body>\n"
        f"<h1>{_e(collection.name)}</h1>\n"
        f'<p class="meta">{_e(summary)}</p>\n'
        + "\n<hr>\n".join(body)
        + "\n</body></html>\n"
    )


# ------------------------------------------------------------------
# Mind map outline (two-space indent per level, importable by XMind et al.)
# ------------------------------------------------------------------

def to_mindmap(collection: Collection) -> str:
    lines = [collection.name]
    if collection.is_report:
        for trend in collection.trends:
            lines.append(f"  {trend.ipName}")
            lines.append(f"    类别: {trend.category}")
            lines.append(f"    原因: {trend.reason}")
            if trend.momentum:
                lines.append(f"    阶段: {trend.momentum}")
            if trend.compatibility:
                lines.append("    适配品类")
                lines.extend(f"      {c}" for c in trend.compatibility)
    else:
        for case in collection.cases:
            lines.append(f"  {case.projectName}")
            lines.append(f"    时间: {case.date}")
            lines.append(f"    产品: {case.productName}")
            lines.append(f"    合作: {case.partnerIntro}")
            lines.append(f"    {RIGHTS_LABEL}")
            lines.extend(f"      {r.title}" for r in case.rights)
            lines.append(f"    洞察: {case.insight}")
    # outline nodes are single lines
    return "\n".join(line.replace("\r", " ").replace("\n", " ") for line in lines) + "\n"


_RENDERERS = {
    "markdown": to_markdown,
    "html": to_html,
    "mindmap": to_mindmap,
}


def render(collection: Collection, fmt: str) -> str:
    if fmt not in _RENDERERS:
        raise ValueError(f"Unknown export format: {fmt} (expected one of {', '.join(_RENDERERS)})")
    return _RENDERERS[fmt](collection)


async def write_export(collection: Collection, fmt: str, out_dir: str) -> str:
    """Render `collection` as `fmt` and write it under `out_dir`. Returns the file path."""
    content = render(collection, fmt)
    extension, suffix = EXPORT_FORMATS[fmt]
    path = os.path.join(out_dir, export_filename(collection.name, extension, suffix))
    written = await save_text_artifact(content, path)
    logger.info(f"Exported collection {collection.id} as {fmt}: {written}")
    return written
