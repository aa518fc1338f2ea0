"""Tests for video and link extraction from page markup."""

import pytest

from vidscan.content import build_descriptor, extract_page

PAGE = "https://h.example/articles/page.html"
HOST = "h.example"


def _html(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


class TestMetadata:
    """Title and description precedence."""

    def test_og_title_preferred_over_title_tag(self):
        html = _html(
            '<video src="a.mp4"></video>',
            '<meta property="og:title" content=" OG Title "><title>Doc</title>',
        )
        video = extract_page(html, PAGE, HOST).videos[0]
        assert video.page_title == "OG Title"

    def test_title_tag_used_when_og_title_empty(self):
        html = _html(
            '<video src="a.mp4"></video>',
            '<meta property="og:title" content="  "><title> Doc title </title>',
        )
        assert extract_page(html, PAGE, HOST).videos[0].page_title == "Doc title"

    def test_og_description_preferred(self):
        html = _html(
            '<video src="a.mp4"></video>',
            '<meta name="description" content="plain">'
            '<meta property="og:description" content="og">',
        )
        assert extract_page(html, PAGE, HOST).videos[0].description == "og"

    def test_name_description_fallback(self):
        html = _html(
            '<video src="a.mp4"></video>',
            '<meta name="description" content="plain">',
        )
        assert extract_page(html, PAGE, HOST).videos[0].description == "plain"


class TestFallbackText:
    """Descriptor fallbacks when page metadata is missing."""

    def test_filename_used_when_metadata_absent(self):
        video = build_descriptor("https://h.example/v/clip.mp4", PAGE, "", "")
        assert video.page_title == "clip.mp4"
        assert video.description == "clip.mp4"
        assert video.filename == "clip.mp4"

    def test_placeholders_when_filename_empty(self):
        video = build_descriptor("https://h.example/", PAGE, "", "")
        assert video.page_title == "Untitled page"
        assert video.description == "No description available"
        assert video.filename == "Unknown file"

    def test_page_metadata_wins_over_filename(self):
        video = build_descriptor("https://h.example/v/clip.mp4", PAGE, "T", "D")
        assert (video.page_title, video.description) == ("T", "D")


class TestVideoExtraction:
    """Videos from <video>, <source> and extension-matched anchors."""

    def test_video_and_nested_sources_in_document_order(self):
        html = _html(
            '<video src="/v/main.mp4">'
            '<source src="/v/alt.webm"><source src="alt2.mov"></video>'
            '<video><source src="https://cdn.example/x.m4v?sig=1"></video>'
        )
        urls = [video.video_url for video in extract_page(html, PAGE, HOST).videos]
        assert urls == [
            "https://h.example/v/main.mp4",
            "https://h.example/v/alt.webm",
            "https://h.example/articles/alt2.mov",
            "https://cdn.example/x.m4v?sig=1",
        ]

    def test_descriptor_fields(self):
        html = _html('<video src="/v/1.mp4"></video>', "<title>Home</title>")
        video = extract_page(html, PAGE, HOST).videos[0]
        assert video.page_url == PAGE
        assert video.filename == "1.mp4"
        assert video.to_dict() == {
            "videoUrl": "https://h.example/v/1.mp4",
            "pageUrl": PAGE,
            "pageTitle": "Home",
            "description": "1.mp4",
            "filename": "1.mp4",
        }

    def test_duplicates_within_page_are_kept(self):
        html = _html('<video src="/v/1.mp4"></video><a href="/v/1.mp4">dl</a>')
        videos = extract_page(html, PAGE, HOST).videos
        assert [v.video_url for v in videos] == ["https://h.example/v/1.mp4"] * 2

    @pytest.mark.parametrize("href", ["/a/CLIP.MP4", "/a/b.webm", "/a/c.mov", "/a/d.m4v"])
    def test_anchor_with_video_extension(self, href):
        videos = extract_page(_html(f'<a href="{href}">x</a>'), PAGE, HOST).videos
        assert len(videos) == 1

    def test_anchor_without_video_extension_is_not_a_video(self):
        html = _html('<a href="/a/movie.avi">x</a><a href="/page">y</a>')
        assert extract_page(html, PAGE, HOST).videos == []

    def test_video_without_src_is_ignored(self):
        html = _html('<video controls></video><video src=""></video>')
        assert extract_page(html, PAGE, HOST).videos == []

    def test_unresolvable_reference_is_skipped(self):
        html = _html(
            '<video src="http://[broken/x.mp4"></video><video src="/ok.mp4"></video>'
        )
        urls = [v.video_url for v in extract_page(html, PAGE, HOST).videos]
        assert urls == ["https://h.example/ok.mp4"]

    def test_custom_extensions(self):
        html = _html('<a href="/a.mkv">x</a><a href="/b.mp4">y</a>')
        videos = extract_page(html, PAGE, HOST, video_extensions=("mkv",)).videos
        assert [v.filename for v in videos] == ["a.mkv"]


class TestLinkExtraction:
    """Same-host outbound link selection."""

    def test_same_host_links_deduplicated_in_first_seen_order(self):
        html = _html(
            '<a href="/b">b</a><a href="/a">a</a><a href="/b">b again</a>'
            '<a href="https://h.example/c?x=1">c</a>'
        )
        links = extract_page(html, PAGE, HOST).next_links
        assert links == [
            "https://h.example/b",
            "https://h.example/a",
            "https://h.example/c?x=1",
        ]

    def test_other_hosts_and_schemes_excluded(self):
        html = _html(
            '<a href="https://other.example/page">o</a>'
            '<a href="https://sub.h.example/page">s</a>'
            '<a href="https://h.example:8443/page">p</a>'
            '<a href="mailto:me@h.example">m</a>'
            '<a href="javascript:void(0)">j</a>'
        )
        assert extract_page(html, PAGE, HOST).next_links == []

    def test_off_host_video_link_is_video_but_not_crawled(self):
        html = _html('<a href="http://other/clip.mp4">c</a><a href="http://other/x.html">x</a>')
        parsed = extract_page(html, PAGE, HOST)
        assert [v.video_url for v in parsed.videos] == ["http://other/clip.mp4"]
        assert parsed.next_links == []

    def test_same_host_video_link_is_both_video_and_link(self):
        parsed = extract_page(_html('<a href="/v/2.mp4">2</a>'), PAGE, HOST)
        assert [v.video_url for v in parsed.videos] == ["https://h.example/v/2.mp4"]
        assert parsed.next_links == ["https://h.example/v/2.mp4"]

    def test_same_host_video_link_not_crawled_when_disabled(self):
        parsed = extract_page(
            _html('<a href="/v/2.mp4">2</a>'), PAGE, HOST, crawl_video_links=False
        )
        assert len(parsed.videos) == 1
        assert parsed.next_links == []


class TestMalformedMarkup:
    """Parsing never raises on broken input."""

    @pytest.mark.parametrize(
        "html",
        [
            "",
            "not html at all",
            "<video src='/v/1.mp4'><source src=/v/2.mp4><a href=/next>",
            "<<<>>></div></video><a href='/x'",
        ],
    )
    def test_best_effort(self, html):
        parsed = extract_page(html, PAGE, HOST)
        assert isinstance(parsed.videos, list)
        assert isinstance(parsed.next_links, list)

    def test_unclosed_tags_still_yield_videos_and_links(self):
        parsed = extract_page("<video src='/v/1.mp4'><a href=/next>", PAGE, HOST)
        assert parsed.videos[0].video_url == "https://h.example/v/1.mp4"
        assert parsed.next_links == ["https://h.example/next"]


class TestCanonicalAddresses:
    """Resolved references are returned in canonical form."""

    def test_home_page_variants_become_one_link(self):
        html = _html(
            '<a href="https://h.example">a</a>'
            '<a href="HTTPS://H.EXAMPLE:443/">b</a>'
            '<a href="/">c</a>'
        )
        assert extract_page(html, PAGE, HOST).next_links == ["https://h.example/"]

    def test_host_case_is_folded_for_videos(self):
        html = _html(
            '<video src="https://H.Example/v/a.mp4"></video>'
            '<a href="HTTP://CDN.example:80/b.webm">b</a>'
        )
        urls = [v.video_url for v in extract_page(html, PAGE, HOST).videos]
        assert urls == ["https://h.example/v/a.mp4", "http://cdn.example/b.webm"]
