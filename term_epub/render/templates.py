# term_epub/render/templates.py
"""
EPUB 리소스 텍스트 템플릿

챕터 XHTML, 표지, 스타일시트, container.xml, content.opf / toc.ncx 조각.
OPF/NCX는 용어 수가 많을 수 있으므로 헤더/항목/푸터를 나눠 스트리밍으로 씁니다.
"""

from __future__ import annotations

from typing import List, Optional
from xml.sax.saxutils import escape

from ..records import Record

XHTML_MEDIA_TYPE = "application/xhtml+xml"
EPUB_MIMETYPE = "application/epub+zip"

TITLE_HREF = "title.xhtml"
STYLE_HREF = "style.css"
NCX_HREF = "toc.ncx"

_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(s: str) -> str:
    return escape(s or "", _ENTITIES)


def chapter_href(position: int) -> str:
    return f"chapter{position}.xhtml"


def chapter_id(position: int) -> str:
    return f"chapter{position}"


# =========================
# Chapter
# =========================
CHAPTER_HEAD = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="http://www.w3.org/1999/xhtml">
  <head>
    <title>{title}</title>
    <link rel="stylesheet" type="text/css" href="style.css"/>
  </head>
  <body>
    <h1>{title}</h1>
    <p>
"""

CHAPTER_FOOT = """    <div class="metadata">
      <p>Term #{position} | Definitions: {definitions} | Related: {related}</p>
    </div>
  </body>
</html>
"""


def headline_form(record: Record) -> str:
    """표제어의 대체 문자 표기: 정의의 unicode 값 → 관련어 중 자기 자신의 unicode 순"""
    for name in sorted(record.definitions_alt1):
        v = record.definitions_alt1[name]
        if v.strip():
            return v
    for rk in record.related_keys:
        if rk.form_b == record.key and rk.form_a.strip():
            return rk.form_a
    return ""


def render_definitions(record: Record) -> List[str]:
    lines = ["    <h2>Definitions</h2>\n"]
    for name in record.source_names():
        alt1 = record.definitions_alt1.get(name, "")
        alt2 = record.definitions_alt2.get(name, "")
        text = record.definitions.get(name, "")
        lines.append(
            f'    <div class="definition">\n      <div class="dict-name">{escape_xml(name)}</div>\n'
        )
        if alt1.strip():
            lines.append(f'      <p><span class="unicode">{escape_xml(alt1)}</span></p>\n')
        if alt2.strip():
            lines.append(f'      <p><span class="wylie">{escape_xml(alt2)}</span></p>\n')
        if text.strip():
            lines.append(f"      <p>{escape_xml(text)}</p>\n")
        lines.append("    </div>\n")
    return lines


def render_related(record: Record) -> List[str]:
    if not record.has_related:
        return []
    items = [rk for rk in record.related_keys if not rk.is_empty]
    if not items:
        return []
    lines = [
        '    <div class="related-terms">\n',
        "      <h2>Related Terms</h2>\n",
        "      <ul>\n",
    ]
    for rk in items:
        lines.append(
            f'        <li><span class="unicode">{escape_xml(rk.form_a)}</span> '
            f'(<span class="wylie">{escape_xml(rk.form_b)}</span>)</li>\n'
        )
    lines.append("      </ul>\n    </div>\n")
    return lines


def render_chapter(position: int, record: Record) -> str:
    """position번째 챕터 XHTML (섹션 출력 여부는 개수 필드가 아닌 실제 컬렉션 기준)"""
    key = escape_xml(record.key)
    parts = [CHAPTER_HEAD.format(title=key)]
    alt = headline_form(record)
    if alt:
        parts.append(f'      <span class="unicode">{escape_xml(alt)}</span> (<span class="wylie">{key}</span>)\n')
    else:
        parts.append(f'      <span class="wylie">{key}</span>\n')
    parts.append("    </p>\n")
    if record.has_definitions:
        parts.extend(render_definitions(record))
    parts.extend(render_related(record))
    parts.append(CHAPTER_FOOT.format(
        position=position,
        definitions=record.definitions_count,
        related=record.related_count,
    ))
    return "".join(parts)


# =========================
# Title page
# =========================
TITLE_PAGE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="http://www.w3.org/1999/xhtml">
  <head>
    <title>{title}</title>
    <link rel="stylesheet" type="text/css" href="style.css"/>
  </head>
  <body>
    <h1>{title}</h1>
    <p class="author">By {author}</p>
    <p class="timestamp">Generated: {date}</p>
    <p class="description">{description}</p>
  </body>
</html>"""

DEFAULT_DESCRIPTION = "A Tibetan-English dictionary with definitions and related terms."


def render_title_page(title: str, author: str, date: str, description: str = DEFAULT_DESCRIPTION) -> str:
    return TITLE_PAGE.format(
        title=escape_xml(title),
        author=escape_xml(author),
        date=escape_xml(date),
        description=escape_xml(description),
    )


# =========================
# Container / OPF / NCX
# =========================
CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

OPF_HEAD = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="uuid_id">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">
    <dc:title>{title}</dc:title>
    <dc:creator opf:role="aut">{author}</dc:creator>
    <dc:language>{language}</dc:language>
    <dc:date>{date}</dc:date>
    <dc:identifier id="uuid_id">{identifier}</dc:identifier>
  </metadata>
  <manifest>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
    <item id="style" href="style.css" media-type="text/css"/>
{font_item}    <item id="title" href="title.xhtml" media-type="application/xhtml+xml"/>
"""

OPF_SPINE_HEAD = """  </manifest>
  <spine toc="ncx">
    <itemref idref="title"/>
"""

OPF_FOOT = """  </spine>
  <guide>
    <reference type="cover" title="Cover" href="title.xhtml"/>
  </guide>
</package>"""


def render_opf_head(
    title: str,
    author: str,
    language: str,
    date: str,
    identifier: str,
    font_href: Optional[str] = None,
    font_media_type: Optional[str] = None,
) -> str:
    font_item = ""
    if font_href:
        font_item = f'    <item id="font" href="{escape_xml(font_href)}" media-type="{font_media_type}"/>\n'
    return OPF_HEAD.format(
        title=escape_xml(title),
        author=escape_xml(author),
        language=escape_xml(language),
        date=escape_xml(date),
        identifier=escape_xml(identifier),
        font_item=font_item,
    )


def render_opf_item(position: int) -> str:
    return f'    <item id="{chapter_id(position)}" href="{chapter_href(position)}" media-type="{XHTML_MEDIA_TYPE}"/>\n'


def render_opf_itemref(position: int) -> str:
    return f'    <itemref idref="{chapter_id(position)}"/>\n'


NCX_HEAD = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head>
    <meta name="dtb:uid" content="{identifier}"/>
    <meta name="dtb:depth" content="1"/>
    <meta name="dtb:totalPageCount" content="0"/>
    <meta name="dtb:maxPageNumber" content="0"/>
  </head>
  <docTitle>
    <text>{title}</text>
  </docTitle>
  <navMap>
    <navPoint id="title" playOrder="1">
      <navLabel><text>Title</text></navLabel>
      <content src="title.xhtml"/>
    </navPoint>
"""

NCX_FOOT = """  </navMap>
</ncx>"""


def render_ncx_head(title: str, identifier: str) -> str:
    return NCX_HEAD.format(title=escape_xml(title), identifier=escape_xml(identifier))


def render_nav_point(position: int, label: str) -> str:
    # 표지가 playOrder 1
    return (
        f'    <navPoint id="{chapter_id(position)}" playOrder="{position + 1}">\n'
        f"      <navLabel><text>{escape_xml(label)}</text></navLabel>\n"
        f'      <content src="{chapter_href(position)}"/>\n'
        "    </navPoint>\n"
    )


# =========================
# Stylesheet
# =========================
FONT_FACE = """@font-face {{
  font-family: '{family}';
  src: url('{src}') format('woff');
  font-weight: normal;
  font-style: normal;
}}
"""

TIBETAN_FONT_STACK = (
    '"Droid Sans", "Jomolhari", "Jomolhari ID", "DDC Uchen", "Kailasa", "DDC Rinzin", '
    '"Uchen_05", "Qomolangma-Uchen Sarchung", "Qomolangma-Uchen Sutung", "Narthang", '
    '"CTRC-Uchen", "Monlam Uni OuChan2", "Monlam Uni OuChan1", "XenoType Tibetan New", '
    '"TCRC Youtso Unicode", "Tibetan Machine Uni", "DDCRinzin-webfont", "SambhotaDege", '
    '"Microsoft Himalaya", "Tib-US Unicode"'
)

SANS_STACK = '"Droid Sans", "DejaVu Sans", LiberationSans, Arial, sans-serif'

STYLESHEET = f"""
html, body {{
  padding: 0;
  margin: 0;
}}

body {{
  color: #000;
  background-color: #fff;
  font-family: {SANS_STACK};
  line-height: 1.6;
  margin: 1em;
  text-rendering: optimizeLegibility;
}}

h1 {{
  font-family: {SANS_STACK};
  font-size: 1.3em;
  margin-top: 0.5em;
  margin-bottom: 0.3em;
  color: #333;
  font-weight: normal;
}}

h2 {{
  font-family: {SANS_STACK};
  font-size: 1.3em;
  margin-top: 0.8em;
  margin-bottom: 0.3em;
  color: #555;
  border-bottom: 1px solid #ddd;
  padding-bottom: 0.2em;
}}

.definition {{
  margin-left: 0;
  margin-bottom: 0.5em;
  padding: 0.3em 0.3em 0.3em 0.7em;
  font-size: 1.2em;
  font-family: "Droid Serif", "DejaVu Serif", Verdana, Georgia, serif;
}}

.definition p {{
  margin: 0 0 0.45em 0;
}}

.dict-name {{
  color: #666;
  font-weight: bold;
  font-family: {SANS_STACK};
  padding: 0.6em 0.9em 0.6em 0.3em;
  font-size: 1em;
}}

.related-terms {{
  margin-top: 1em;
  padding: 0.5em;
  background-color: #f9f9f9;
  border-left: 3px solid #ddd;
}}

.related-terms h2 {{
  margin-top: 0;
}}

.related-terms ul {{
  list-style-type: disc;
  padding-left: 1.2em;
  margin: 0.5em 0;
}}

.related-terms li {{
  margin: 0.3em 0;
  padding: 0.2em 0;
  font-size: 1.1em;
}}

.wylie {{
  font-family: monospace;
  font-size: 0.9em;
}}

.tib, .unicode {{
  font-family: {TIBETAN_FONT_STACK};
  font-size: 1.4em;
  line-height: 180%;
  text-rendering: optimizeLegibility;
}}

.metadata {{
  font-size: 0.85em;
  color: #999;
  margin-top: 1.5em;
  padding-top: 1em;
  border-top: 1px solid #ddd;
}}

.author {{
  font-size: 1.2em;
  font-style: italic;
  text-align: center;
  margin-top: 2em;
}}

.timestamp {{
  font-size: 0.9em;
  text-align: center;
  color: #999;
}}

.description {{
  text-align: center;
  font-style: italic;
  margin-bottom: 3em;
}}

a {{
  color: #222;
  text-decoration: none;
}}
"""


def render_stylesheet(font_src: Optional[str] = None, font_family: str = "DDC Uchen") -> str:
    if not font_src:
        return STYLESHEET
    return FONT_FACE.format(family=font_family, src=font_src) + STYLESHEET
