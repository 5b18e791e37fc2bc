import json
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Comment

SOFT404_PHRASES = [
    "page not found", "404", "doesn't exist", "does not exist",
    "we can’t find", "we can't find", "error 404", "page was not found"
]

_INVISIBLE_PARENTS = {"script", "style", "noscript", "template", "head", "title"}
_WORD_RE = re.compile(r"[^\W_]+(?:['’-][^\W_]+)*", re.UNICODE)


@dataclass(frozen=True)
class PageSnapshot:
    """DOM of the loaded page, parsed once and shared read-only by every checker."""
    url: str
    html_size: int = 0
    head: dict = field(default_factory=dict)
    body: dict = field(default_factory=dict)
    jsonld: dict = field(default_factory=dict)


def parse_html(html: str):
    return BeautifulSoup(html or "", "lxml")


def extract_head_data(soup: BeautifulSoup) -> dict:
    head = soup.head
    title = (head.title.get_text(strip=True) if head and head.title else "") if soup else ""
    meta_desc = ""
    meta_keywords = ""
    meta_robots = ""
    viewport = ""
    charset = ""
    og = {}
    twitter = {}
    canonicals = []
    hreflangs = []
    favicon = ""
    html_lang = ""
    jsonld_blocks = []

    if soup and soup.html and soup.html.has_attr("lang"):
        html_lang = (soup.html.get("lang") or "").strip()

    if head:
        for m in head.find_all("meta"):
            name = (m.get("name") or "").strip().lower()
            prop = (m.get("property") or "").strip().lower()
            content = (m.get("content") or "").strip()
            if m.has_attr("charset"):
                charset = (m.get("charset") or "").strip()
            if name == "description":
                meta_desc = content
            elif name == "keywords":
                meta_keywords = content
            elif name == "robots":
                meta_robots = content.lower()
            elif name == "viewport":
                viewport = content
            elif name.startswith("twitter:"):
                twitter[name] = content
            if prop.startswith("og:"):
                og[prop] = content

        for link in head.find_all("link"):
            rel = " ".join((link.get("rel") or [])).lower()
            href = (link.get("href") or "").strip()
            if "canonical" in rel and href:
                canonicals.append(href)
            elif "icon" in rel and href and not favicon:
                favicon = href
            elif "alternate" in rel and link.get("hreflang"):
                hreflangs.append({"hreflang": link.get("hreflang"), "href": href})

    # JSON-LD may live anywhere in the document
    for script in (soup.find_all("script") if soup else []):
        t = (script.get("type") or "").strip().lower()
        if t == "application/ld+json":
            txt = (script.string or "").strip()
            if txt:
                jsonld_blocks.append(txt)

    return {
        "title": title,
        "meta_description": meta_desc,
        "meta_keywords": meta_keywords,
        "meta_robots": meta_robots,
        "viewport": viewport,
        "charset": charset,
        "og": og,
        "twitter": twitter,
        "canonicals": canonicals,
        "hreflangs": hreflangs,
        "favicon": favicon,
        "html_lang": html_lang,
        "jsonld_blocks": jsonld_blocks
    }


def _visible_text(soup: BeautifulSoup) -> str:
    parts = []
    for s in soup.find_all(string=True):
        if isinstance(s, Comment):
            continue
        if s.parent is not None and s.parent.name in _INVISIBLE_PARENTS:
            continue
        t = s.strip()
        if t:
            parts.append(t)
    return " ".join(parts)


def _has_label(soup: BeautifulSoup, el) -> bool:
    if el.get("aria-label") or el.get("aria-labelledby") or el.get("title"):
        return True
    el_id = el.get("id")
    if el_id and soup.find("label", attrs={"for": el_id}):
        return True
    return el.find_parent("label") is not None


def extract_body_signals(soup: BeautifulSoup) -> dict:
    headings = []
    links = []
    images = []
    scripts = []
    stylesheets = []
    iframes = []
    unlabeled_inputs = []
    empty_buttons = 0
    microdata_types = []
    text = ""
    element_count = 0

    if soup:
        element_count = len(soup.find_all(True))
        for h in soup.find_all(re.compile(r"^h[1-6]$")):
            headings.append({"tag": h.name, "level": int(h.name[1]), "text": h.get_text(" ", strip=True)})
        for a in soup.find_all("a"):
            href = (a.get("href") or "").strip()
            links.append({
                "href": href,
                "text": a.get_text(" ", strip=True),
                "rel": " ".join(a.get("rel") or []).lower(),
                "has_aria_label": bool(a.get("aria-label") or a.get("title")),
            })
        for img in soup.find_all("img"):
            alt = img.get("alt")
            images.append({
                "src": (img.get("src") or "").strip(),
                "alt": alt.strip() if alt is not None else None,
                "has_alt": alt is not None and bool(alt.strip()),
                "width": img.get("width"),
                "height": img.get("height"),
                "loading": (img.get("loading") or "").lower(),
            })
        for s in soup.find_all("script"):
            src = (s.get("src") or "").strip()
            if src:
                scripts.append(src)
        for link in soup.find_all("link"):
            rel = " ".join((link.get("rel") or [])).lower()
            href = (link.get("href") or "").strip()
            if "stylesheet" in rel and href:
                stylesheets.append(href)
        for f in soup.find_all("iframe"):
            iframes.append((f.get("src") or "").strip())
        for el in soup.find_all(["input", "select", "textarea"]):
            if el.name == "input" and (el.get("type") or "text").lower() in ("hidden", "submit", "button", "image", "reset"):
                continue
            if not _has_label(soup, el):
                unlabeled_inputs.append(el.get("name") or el.get("id") or el.name)
        for b in soup.find_all("button"):
            if not b.get_text(strip=True) and not b.get("aria-label") and not b.get("title"):
                empty_buttons += 1
        for el in soup.find_all(attrs={"itemtype": True}):
            microdata_types.append(el.get("itemtype"))
        text = _visible_text(soup)

    soft404 = any(p in (text or "").lower() for p in SOFT404_PHRASES)
    has_breadcrumbs = bool(soup and (
        soup.find(attrs={"aria-label": re.compile("breadcrumb", re.I)})
        or soup.find(class_=re.compile("breadcrumb", re.I))
    ))

    return {
        "h1_count": sum(1 for h in headings if h["level"] == 1),
        "headings": headings,
        "all_links": [ln["href"] for ln in links if ln["href"]],
        "links": links,
        "images": images,
        "scripts": scripts,
        "stylesheets": stylesheets,
        "iframes": iframes,
        "unlabeled_inputs": unlabeled_inputs,
        "empty_buttons": empty_buttons,
        "microdata_types": microdata_types,
        "element_count": element_count,
        "has_breadcrumbs": has_breadcrumbs,
        "text": text,
        "word_count": len(_WORD_RE.findall(text or "")),
        "soft404_signal": soft404
    }


def parse_jsonld_blocks(blocks: list) -> dict:
    errors = 0
    types = []
    for b in blocks or []:
        try:
            data = json.loads(b)
        except ValueError:
            errors += 1
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            graph = item.get("@graph")
            for node in (graph if isinstance(graph, list) else [item]):
                if isinstance(node, dict) and node.get("@type"):
                    t = node["@type"]
                    types.extend(t if isinstance(t, list) else [t])
    return {"jsonld_count": len(blocks or []), "jsonld_parse_errors": errors, "jsonld_types": types}


def build_snapshot(url: str, html: str) -> PageSnapshot:
    soup = parse_html(html)
    head = extract_head_data(soup)
    return PageSnapshot(
        url=url,
        html_size=len((html or "").encode("utf-8", errors="ignore")),
        head=head,
        body=extract_body_signals(soup),
        jsonld=parse_jsonld_blocks(head.get("jsonld_blocks", [])),
    )
