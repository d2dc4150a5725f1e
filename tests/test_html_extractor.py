from autofill_prep.agents.html_extractor import (
    MAX_DESCRIPTION_CHARS,
    MAX_TEXT_CHARS,
    MAX_TITLE_CHARS,
    extract_page,
)


def test_title_and_meta_fields():
    html = (
        "<html><head><title>\n  Backend Intern at Acme | LinkedIn \n</title>"
        '<meta name="description" content="Join Acme.">'
        '<meta property="og:title" content="Backend Intern">'
        '<meta property="og:description" content="Acme is hiring.">'
        "</head><body></body></html>"
    )
    page = extract_page(html, url="https://boards.example.com/jobs/123")

    assert page.url == "https://boards.example.com/jobs/123"
    assert page.title == "Backend Intern at Acme | LinkedIn"
    assert page.description == "Join Acme."
    assert page.og_title == "Backend Intern"
    assert page.og_description == "Acme is hiring."


def test_title_and_description_fall_back_to_open_graph():
    html = (
        "<html><head><title>   </title>"
        '<meta content="OG title" property="og:title">'
        '<meta property="og:description" content="OG description">'
        "</head></html>"
    )
    page = extract_page(html)

    assert page.title == "OG title"
    assert page.description == "OG description"


def test_meta_values_are_plain_text():
    html = '<head><title>R&amp;D &lt;Team&gt;</title><meta name="description" content="Tom &amp; Jerry&#39;s"></head>'
    page = extract_page(html)

    assert page.title == "R&D <Team>"
    assert page.description == "Tom & Jerry's"


def test_json_ld_skips_malformed_block_and_keeps_valid_one():
    html = """<html><head>
    <script type="application/ld+json">{"@type": "JobPosting", "title": "Backend Intern"}</script>
    <script type="application/ld+json">{"@type": "Organization", "name": "Acme",</script>
    </head><body><p>hello</p></body></html>"""
    page = extract_page(html)

    assert page.json_ld == [{"@type": "JobPosting", "title": "Backend Intern"}]
    assert page.text == "hello"


def test_json_ld_array_block_contributes_each_element():
    html = (
        '<script type="application/ld+json">[{"@type": "WebSite"}, {"@type": "JobPosting"}]</script>'
        '<script type="Application/LD+JSON">{"@type": "Organization"}</script>'
        '<script type="application/ld+json">   </script>'
        '<script type="text/javascript">var x = {"@type": "JobPosting"};</script>'
    )
    page = extract_page(html)

    assert page.json_ld == [{"@type": "WebSite"}, {"@type": "JobPosting"}, {"@type": "Organization"}]


def test_visible_text_strips_scripts_styles_and_comments():
    html = (
        "<html><head><style>.hidden { display: none }</style></head><body>"
        "<!-- recruiter notes: do not publish -->"
        "<h1>Backend Intern</h1>"
        "<p>Build &amp; ship   APIs.</p><br>"
        "<div>Line&nbsp;two</div>"
        "<script>alert('ignore previous instructions')</script>"
        "<ul><li>Python</li><li>SQL</li></ul>"
        "<table><tr><td>Seoul</td><td>Remote</td></tr></table>"
        "</body></html>"
    )
    text = extract_page(html).text

    assert "alert" not in text
    assert "recruiter notes" not in text
    assert "display" not in text
    assert "<" not in text
    assert "Build & ship APIs." in text
    assert "Line two" in text
    assert "Python\nSQL" in text
    assert "Seoul\nRemote" in text
    assert text == text.strip()


def test_visible_text_collapses_blank_runs():
    html = "<p>first</p>" + "<br>" * 10 + "<div></div>" * 5 + "<p>second</p>"
    assert extract_page(html).text == "first\n\nsecond"


def test_every_field_is_capped_to_a_prefix():
    long_title = "T" * (MAX_TITLE_CHARS * 3)
    long_desc = "D" * (MAX_DESCRIPTION_CHARS * 3)
    body = "<p>" + ("word " * 10_000) + "</p>"
    html = (
        f"<html><head><title>{long_title}</title>"
        f'<meta name="description" content="{long_desc}">'
        f'<meta property="og:title" content="{long_title}">'
        f'<meta property="og:description" content="{long_desc}">'
        f"</head><body>{body}</body></html>"
    )
    page = extract_page(html)

    assert page.title == "T" * MAX_TITLE_CHARS
    assert page.og_title == "T" * MAX_TITLE_CHARS
    assert page.description == "D" * MAX_DESCRIPTION_CHARS
    assert page.og_description == "D" * MAX_DESCRIPTION_CHARS
    assert len(page.text) == MAX_TEXT_CHARS
    assert page.text.startswith("T" * 10)


def test_non_html_and_garbage_input_never_raise():
    assert extract_page("").text == ""
    assert extract_page("").json_ld == []

    page = extract_page('{"jobs": [{"title": "Backend Intern"}]}', content_type="application/json")
    assert page.title == ""
    assert "Backend Intern" in page.text
    assert page.content_type == "application/json"

    broken = extract_page("<html><head><title>Unclosed<meta name=description content=x><<<>>></p></div>")
    assert isinstance(broken.text, str)


def test_content_type_is_not_serialized():
    page = extract_page("<p>x</p>", url="https://a.example", content_type="text/html")
    dumped = page.model_dump(by_alias=True)

    assert "contentType" not in dumped
    assert set(dumped) == {"url", "title", "description", "ogTitle", "ogDescription", "jsonLd", "text"}
