# tests/application/services/test_template_renderer.py
import pytest
from application.services.template_renderer import (
    TemplateRenderer,
    TemplateRenderError,
    RenderSources
)


class TestTemplateRenderer:
    def test_render_result_field(self):
        renderer = TemplateRenderer()
        src = RenderSources(result={"tx": "deadbeef"})
        result = renderer.render("https://live.blockcypher.com/btc-testnet/tx/${result.tx}", src)
        assert result == "https://live.blockcypher.com/btc-testnet/tx/deadbeef"

    def test_render_last_variable(self):
        renderer = TemplateRenderer()
        src = RenderSources(last={"status": 200, "url": "https://example.com"})
        assert renderer.render("Status: ${last.status}", src) == "Status: 200"

    def test_render_result_nested_and_indexed(self):
        renderer = TemplateRenderer()
        src = RenderSources(result={"meta": {"chain": "btc-testnet"}, "txs": ["aa", "bb"]})
        assert renderer.render("${result.meta.chain}/${result.txs.1}", src) == "btc-testnet/bb"

    def test_vars_root_is_unknown(self):
        renderer = TemplateRenderer()
        with pytest.raises(TemplateRenderError, match="unknown root: vars"):
            renderer.render("${vars.user}", RenderSources())

    def test_render_missing_key_is_empty(self):
        renderer = TemplateRenderer()
        assert renderer.render("tx=${result.tx}", RenderSources()) == "tx="

    def test_render_list_is_joined(self):
        renderer = TemplateRenderer()
        src = RenderSources(result={"ids": ["a", None, "c"]})
        assert renderer.render("${result.ids}", src) == "a,,c"

    def test_render_without_placeholder_returns_input(self):
        renderer = TemplateRenderer()
        assert renderer.render("plain text", RenderSources()) == "plain text"
        assert renderer.render(None, RenderSources()) == ""

    def test_render_out_of_range_index_is_empty(self):
        renderer = TemplateRenderer()
        src = RenderSources(result={"items": ["a"]})
        assert renderer.render("${result.items.5}", src) == ""

    def test_unclosed_template_raises(self):
        renderer = TemplateRenderer()
        with pytest.raises(TemplateRenderError, match="unclosed template"):
            renderer.render("${result.tx", RenderSources())

    def test_unknown_root_raises(self):
        renderer = TemplateRenderer()
        with pytest.raises(TemplateRenderError, match="unknown root"):
            renderer.render("${secrets.key}", RenderSources())

    def test_index_on_non_list_raises(self):
        renderer = TemplateRenderer()
        with pytest.raises(TemplateRenderError, match="non-list"):
            renderer.render("${result.tx.0}", RenderSources(result={"tx": "abc"}))
