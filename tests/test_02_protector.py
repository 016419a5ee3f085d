"""
Protection & repair
===================
Tests for:
  - DocumentProtector: scripts, comments, conditional comments, href/src
  - RepairPass: <picture> closing tags, unprotect
"""

from __future__ import annotations

import pytest

from termwrap.services.termwrap import DocumentProtector, RepairPass
from termwrap.services.termwrap.repair import repair_pictures

MARKER = "HTMLTERMWRAPPER"


class TestProtectBlocks:
    def setup_method(self):
        self.protector = DocumentProtector()

    def test_script_body_is_hidden(self):
        html = '<p>a</p><script type="text/javascript">var Example = 1;</script><p>b</p>'
        protected = self.protector.protect(html)
        assert "Example" not in protected
        assert "<script" not in protected
        assert f"<!--{MARKER}" in protected
        assert protected.startswith("<p>a</p><!--")
        assert protected.endswith("--><p>b</p>")

    def test_comment_is_hidden(self):
        protected = self.protector.protect("<p>x <!-- Example --> y</p>")
        assert "Example" not in protected
        assert protected.count("<!--") == 1

    def test_conditional_comment_is_hidden_whole(self):
        html = '<!--[if IE]><p class="ie">Example</p><![endif]--><p>ok</p>'
        protected = self.protector.protect(html)
        assert "Example" not in protected
        assert "endif" not in protected
        assert protected.endswith("<p>ok</p>")

    def test_comment_inside_script_encoded_once(self):
        html = "<script>// <!-- legacy --> \nrun();</script>"
        protected = self.protector.protect(html)
        assert protected.count(f"<!--{MARKER}") == 1
        assert self.protector.unprotect(protected) == html

    @pytest.mark.parametrize("html", [
        "<script>if (a < b && c > d) { x = '</p>'; }</script>",
        "<SCRIPT src=\"app.js\"></SCRIPT>",
        "<!---->",
        "<!-- multi\nline\ncomment -->",
        "<p>Grüße <!-- ünïcödé --></p>",
    ])
    def test_round_trip(self, html):
        assert self.protector.unprotect(self.protector.protect(html)) == html


class TestProtectUrls:
    def setup_method(self):
        self.protector = DocumentProtector()

    def test_href_value_is_hidden(self):
        html = '<a href="/wiki/Example page?x=1&amp;y=2">Example</a>'
        protected = self.protector.protect(html)
        assert f'href="{MARKER}' in protected
        assert "/wiki/Example page" not in protected
        assert protected.endswith('">Example</a>')

    def test_src_value_is_hidden(self):
        protected = self.protector.protect('<img src="Example.png" alt="Example">')
        assert "Example.png" not in protected
        assert 'alt="Example"' in protected

    def test_round_trip(self):
        html = '<a href="https://example.com/ä ö">x</a><img src="a b.png"><a href="">e</a>'
        assert self.protector.unprotect(self.protector.protect(html)) == html

    def test_unmarked_values_left_alone(self):
        html = '<a href="https://example.com/">x</a>'
        assert self.protector.unprotect(html) == html


class TestMarker:
    def test_custom_marker(self):
        protector = DocumentProtector("CUSTOMMARK")
        protected = protector.protect('<script>x()</script><a href="/y">y</a>')
        assert "<!--CUSTOMMARK" in protected
        assert 'href="CUSTOMMARK' in protected
        assert MARKER not in protected

    def test_other_marker_does_not_unprotect(self):
        protected = DocumentProtector("FIRSTMARK").protect("<script>x()</script>")
        assert DocumentProtector("SECONDMARK").unprotect(protected) == protected

    @pytest.mark.parametrize("marker", ["", "A-B", 'A"B'])
    def test_unusable_marker_rejected(self, marker):
        with pytest.raises(ValueError):
            DocumentProtector(marker)


class TestRepair:
    def test_spurious_source_end_tags_removed(self):
        html = (
            '<picture><source srcset="a.webp"></source>'
            '<source srcset="b.avif"></source><img src="c.jpg"></picture>'
        )
        assert repair_pictures(html) == (
            '<picture><source srcset="a.webp"><source srcset="b.avif"><img src="c.jpg"></picture>'
        )

    def test_every_picture_repaired(self):
        html = "<picture><source></source></picture><p>x</p><picture><source></source></picture>"
        assert "</source>" not in repair_pictures(html)

    def test_outside_picture_untouched(self):
        html = '<video><source src="x.mp4"></source></video>'
        assert repair_pictures(html) == html

    def test_repair_pass_unprotects(self):
        protector = DocumentProtector()
        protected = protector.protect('<picture><source srcset="a"><img src="b.jpg"></picture>')
        serialised = protected.replace('<source srcset="a">', '<source srcset="a"></source>')
        assert RepairPass(protector).repair(serialised) == (
            '<picture><source srcset="a"><img src="b.jpg"></picture>'
        )
