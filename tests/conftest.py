"""Shared fixtures for story tests."""

import pytest

from twine_workshop.model import Passage, Story


@pytest.fixture
def cave_story():
    """Three-passage story using all three link syntaxes."""
    passages = {
        'Start': Passage(
            name='Start',
            content='You stand at the entrance.\n\n[[Enter->Cave]]\n[[Leave|Road]]',
            tags=('intro',),
            x=100, y=100,
        ),
        'Cave': Passage(
            name='Cave',
            content="It's dark & <quiet>.\n[[Start]]",
            tags=('dark', 'underground'),
            x=300.4, y=120.6,
            width=200, height=100,
        ),
        'Road': Passage(name='Road', content='The road goes on. [[Back->Start]]', x=500, y=100),
    }
    return Story(
        title='The "Cave" & Co',
        start_passage='Start',
        passages=passages,
        ifid='D674C58C-DEFA-4F70-B7A2-27742230C0FC',
        format='SugarCube',
        format_version='2.36.1',
        zoom=1.5,
        tags='demo test',
        stylesheet='body { color: #333; }\n.x > .y { margin: 0; }',
        javascript="window.ready = true && 1 < 2;",
        tag_colors={'dark': 'purple', 'intro': 'green'},
    )
