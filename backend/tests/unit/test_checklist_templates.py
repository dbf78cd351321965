"""
Unit tests for checklist templates and progress.
"""

import pytest

from eventscale.core.errors import ValidationFailure
from eventscale.models import ChecklistItem
from eventscale.services.checklist_tracker import (
    CHECKLIST_TEMPLATES,
    checklist_progress,
    ordered_tasks,
    template_tasks,
)


class TestTemplateTasks:
    def test_named_template(self):
        assert template_tasks('service') == list(CHECKLIST_TEMPLATES['service'])

    def test_custom_lines(self):
        assert template_tasks('custom', 'Check microphones\n\n  Open doors  \n') == [
            'Check microphones',
            'Open doors',
        ]

    def test_custom_without_lines(self):
        with pytest.raises(ValidationFailure):
            template_tasks('custom', ' \n ')

    def test_unknown_template(self):
        with pytest.raises(ValidationFailure):
            template_tasks('wedding')


class TestProgress:
    def test_progress(self):
        items = [ChecklistItem(task='a', completed=True), ChecklistItem(task='b', completed=False),
                 ChecklistItem(task='c', completed=True)]
        progress = checklist_progress(items)

        assert (progress.done, progress.total, progress.percent) == (2, 3, 67)

    def test_empty_progress(self):
        assert checklist_progress([]).percent == 0

    def test_open_tasks_first(self):
        items = [ChecklistItem(task='done', completed=True), ChecklistItem(task='open', completed=False)]
        assert [item.task for item in ordered_tasks(items)] == ['open', 'done']
