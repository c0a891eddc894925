#!/usr/bin/env python3
"""
Tests for twine_workshop/model.py

Tests story construction and the editing operations that keep passage
names and links consistent.
"""

from dataclasses import FrozenInstanceError

import pytest

from twine_workshop.errors import InvalidName, LastPassage, NameCollision, PassageNotFound
from twine_workshop.links import extract_links
from twine_workshop.model import (
    Passage,
    Story,
    add_passage,
    create_empty,
    delete_passage,
    duplicate_story,
    normalize_passage_names,
    rename_passage,
    rename_story,
    resolve_start_passage,
    set_start_passage,
    update_passage_content,
)


def test_create_empty():
    """Test that a new story holds one Start passage."""
    story = create_empty('  My Story ')

    assert story.title == 'My Story'
    assert story.start_passage == 'Start'
    assert list(story.passages) == ['Start']
    assert story.passages['Start'].name == 'Start'
    assert extract_links(story.passages['Start'].content) == ['Next']
    assert (story.passages['Start'].x, story.passages['Start'].y) == (400, 300)
    assert story.ifid


def test_create_empty_rejects_blank_title():
    with pytest.raises(ValueError):
        create_empty('   ')


def test_story_defaults():
    story = Story(title='T')
    assert story.zoom == 1
    assert story.passages == {}
    assert story.format == ''
    assert story.tag_colors == {}


def test_stories_are_frozen():
    story = create_empty('T')
    with pytest.raises(FrozenInstanceError):
        story.title = 'Other'


class TestRenamePassage:
    """Tests for rename_passage()."""

    def test_rewrites_inbound_links(self, cave_story):
        """Test that links in other passages follow the rename."""
        renamed = rename_passage(cave_story, 'Start', 'Entrance')

        assert 'Start' not in renamed.passages
        assert renamed.passages['Entrance'].name == 'Entrance'
        assert renamed.start_passage == 'Entrance'
        assert renamed.passages['Cave'].content.endswith('[[Entrance]]')
        assert renamed.passages['Road'].content == 'The road goes on. [[Back->Entrance]]'

    def test_keeps_display_text(self, cave_story):
        renamed = rename_passage(cave_story, 'Road', 'Highway')

        assert '[[Leave|Highway]]' in renamed.passages['Start'].content
        assert '[[Enter->Cave]]' in renamed.passages['Start'].content

    def test_keeps_passage_order(self, cave_story):
        renamed = rename_passage(cave_story, 'Cave', 'Grotto')
        assert list(renamed.passages) == ['Start', 'Grotto', 'Road']

    def test_does_not_modify_original(self, cave_story):
        rename_passage(cave_story, 'Start', 'Entrance')

        assert 'Start' in cave_story.passages
        assert cave_story.start_passage == 'Start'
        assert cave_story.passages['Road'].content.endswith('[[Back->Start]]')

    def test_without_inbound_links_only_name_changes(self):
        """Test rename is a pure key change when nothing links to the passage."""
        story = Story(title='T', passages={
            'Start': Passage(name='Start', content='[[Other]]'),
            'Other': Passage(name='Other', content='Nothing here.'),
            'Lonely': Passage(name='Lonely', content='[[Start]]'),
        })
        renamed = rename_passage(story, 'Lonely', 'Alone')

        assert renamed.passages['Start'] == story.passages['Start']
        assert renamed.passages['Other'] == story.passages['Other']
        assert renamed.passages['Alone'].content == '[[Start]]'
        assert renamed.start_passage == 'Start'

    def test_invalid_name(self, cave_story):
        with pytest.raises(InvalidName) as excinfo:
            rename_passage(cave_story, 'Cave', 'a.b')
        assert excinfo.value.name == 'a.b'

    def test_name_collision(self, cave_story):
        with pytest.raises(NameCollision):
            rename_passage(cave_story, 'Cave', 'Road')

    def test_same_name_is_noop(self, cave_story):
        assert rename_passage(cave_story, 'Cave', 'Cave') is cave_story

    def test_missing_passage(self, cave_story):
        with pytest.raises(PassageNotFound):
            rename_passage(cave_story, 'Nowhere', 'Somewhere')


class TestDeletePassage:
    """Tests for delete_passage()."""

    def test_last_passage(self):
        story = create_empty('Solo')
        with pytest.raises(LastPassage):
            delete_passage(story, 'Start')

    def test_deleting_start_picks_new_start(self, cave_story):
        """Test the new start name still resolves to a passage."""
        story, start = delete_passage(cave_story, 'Start')

        assert 'Start' not in story.passages
        assert start == 'Cave'
        assert story.start_passage == start
        assert start in story.passages

    def test_deleting_other_keeps_start(self, cave_story):
        story, start = delete_passage(cave_story, 'Road')

        assert start == 'Start'
        assert list(story.passages) == ['Start', 'Cave']
        assert 'Road' in cave_story.passages

    def test_missing_passage(self, cave_story):
        with pytest.raises(PassageNotFound):
            delete_passage(cave_story, 'Nowhere')


class TestAddPassage:
    """Tests for add_passage()."""

    def test_generated_names(self):
        story = create_empty('T')
        story, first = add_passage(story)
        story, second = add_passage(story)

        assert first == 'New Passage'
        assert second == 'New Passage 1'
        assert list(story.passages) == ['Start', 'New Passage', 'New Passage 1']

    def test_explicit_name_and_position(self):
        story, name = add_passage(create_empty('T'), 'Cave', content='Dark.', x=250, y=75)

        assert name == 'Cave'
        assert story.passages['Cave'] == Passage(name='Cave', content='Dark.', x=250, y=75)

    def test_explicit_name_is_validated(self):
        with pytest.raises(InvalidName):
            add_passage(create_empty('T'), 'toString')
        with pytest.raises(NameCollision):
            add_passage(create_empty('T'), 'Start')


def test_update_passage_content(cave_story):
    story = update_passage_content(cave_story, 'Cave', 'Bright now.')

    assert story.passages['Cave'].content == 'Bright now.'
    assert story.passages['Cave'].tags == ('dark', 'underground')
    assert cave_story.passages['Cave'].content != 'Bright now.'
    with pytest.raises(PassageNotFound):
        update_passage_content(cave_story, 'Nowhere', '')


def test_set_start_passage(cave_story):
    assert set_start_passage(cave_story, 'Road').start_passage == 'Road'
    with pytest.raises(PassageNotFound):
        set_start_passage(cave_story, 'Nowhere')


def test_rename_story(cave_story):
    assert rename_story(cave_story, ' New Title ').title == 'New Title'
    with pytest.raises(ValueError):
        rename_story(cave_story, '')


def test_duplicate_story_gets_new_ifid(cave_story):
    copy = duplicate_story(cave_story)

    assert copy.title == 'The "Cave" & Co (Copy)'
    assert copy.ifid != cave_story.ifid
    assert copy.passages == cave_story.passages
    assert copy.passages is not cave_story.passages


def test_resolve_start_passage_falls_back_to_first():
    story = Story(title='T', start_passage='Gone', passages={
        'B': Passage(name='B'),
        'A': Passage(name='A'),
    })
    assert resolve_start_passage(story) == 'B'
    assert resolve_start_passage(Story(title='Empty', start_passage='Start')) == 'Start'


class TestNormalizePassageNames:
    """Tests for normalize_passage_names()."""

    def test_valid_story_is_returned_unchanged(self, cave_story):
        assert normalize_passage_names(cave_story) is cave_story

    def test_invalid_names_are_replaced_and_links_follow(self):
        story = Story(title='T', start_passage='Ch. 1', passages={
            'Ch. 1': Passage(name='Ch. 1', content='[[Next->Ch. 2]]'),
            'Ch. 2': Passage(name='Ch. 2', content='[[Ch. 1]]'),
            'Ch_ 2': Passage(name='Ch_ 2', content='Taken already.'),
        })
        normalized = normalize_passage_names(story)

        assert list(normalized.passages) == ['Ch_ 1', 'Ch_ 2 1', 'Ch_ 2']
        assert normalized.start_passage == 'Ch_ 1'
        assert normalized.passages['Ch_ 1'].content == '[[Next->Ch_ 2 1]]'
        assert normalized.passages['Ch_ 2 1'].content == '[[Ch_ 1]]'
        assert normalized.passages['Ch_ 2 1'].name == 'Ch_ 2 1'
