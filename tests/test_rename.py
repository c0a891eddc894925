#!/usr/bin/env python3
"""
Tests for twine_workshop/rename.py

Tests that link rewriting touches only the target of matching markers.
"""

from twine_workshop.model import Passage
from twine_workshop.rename import rewrite_links, rewrite_story_links


class TestRewriteLinks:
    """Tests for rewrite_links()."""

    def test_all_three_syntaxes(self):
        text = "[[Cave]] [[Go in->Cave]] [[Go in|Cave]]"
        assert rewrite_links(text, 'Cave', 'Grotto') == "[[Grotto]] [[Go in->Grotto]] [[Go in|Grotto]]"

    def test_display_text_matching_old_name_is_kept(self):
        assert rewrite_links("[[Cave->Hall]]", 'Cave', 'Grotto') == "[[Cave->Hall]]"
        assert rewrite_links("[[Cave|Hall]]", 'Cave', 'Grotto') == "[[Cave|Hall]]"

    def test_whitespace_around_target_is_kept(self):
        assert rewrite_links("[[ Go -> Cave ]]", 'Cave', 'Grotto') == "[[ Go -> Grotto ]]"
        assert rewrite_links("[[ Cave ]]", 'Cave', 'Grotto') == "[[ Grotto ]]"

    def test_other_targets_untouched(self):
        text = "[[Caves]] [[Cave 2]] [[x->Cave!]] plain Cave text"
        assert rewrite_links(text, 'Cave', 'Grotto') == text

    def test_no_reference_is_noop(self):
        text = "Nothing to see. [[Hall]]"
        assert rewrite_links(text, 'Cave', 'Grotto') == text

    def test_target_after_last_pipe_only(self):
        assert rewrite_links("[[a|b|Cave]]", 'Cave', 'Grotto') == "[[a|b|Grotto]]"
        assert rewrite_links("[[a|Cave|b]]", 'Cave', 'Grotto') == "[[a|Cave|b]]"

    def test_target_after_first_arrow(self):
        assert rewrite_links("[[a->b->c]]", 'b->c', 'Grotto') == "[[a->Grotto]]"
        assert rewrite_links("[[a->Cave]]", 'a', 'Grotto') == "[[a->Cave]]"

    def test_multiple_occurrences(self):
        text = "[[Cave]] and again [[back->Cave]]\n[[Cave]]"
        assert rewrite_links(text, 'Cave', 'Grotto') == "[[Grotto]] and again [[back->Grotto]]\n[[Grotto]]"

    def test_empty_marker_untouched(self):
        assert rewrite_links("[[]] [[Cave]]", 'Cave', 'Grotto') == "[[]] [[Grotto]]"

    def test_idempotent(self):
        once = rewrite_links("[[Go->Cave]]", 'Cave', 'Grotto')
        assert rewrite_links(once, 'Cave', 'Grotto') == once


def test_rewrite_story_links_skips_and_shares_unchanged():
    """Test unchanged passages are shared and the skipped passage is untouched."""
    passages = {
        'A': Passage(name='A', content='[[Cave]]'),
        'B': Passage(name='B', content='No links.'),
        'Cave': Passage(name='Cave', content='[[Cave]] loops.'),
    }
    result = rewrite_story_links(passages, 'Cave', 'Grotto', skip='Cave')

    assert result['A'].content == '[[Grotto]]'
    assert result['B'] is passages['B']
    assert result['Cave'].content == '[[Cave]] loops.'
    assert passages['A'].content == '[[Cave]]'
