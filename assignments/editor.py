"""
Applying teacher edits to an assignment.

The editor owns everything an update touches besides the assignment's own
columns: swapping or removing the deadline and kicking off repository
visibility changes when public_repo flips.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from .deadlines import InvalidDeadlineError, parse_deadline
from .models import Assignment, Deadline

logger = logging.getLogger(__name__)


class AssignmentEditor:

    class Error(Exception):
        pass

    class Result:
        SUCCESS = 'success'
        FAILED = 'failed'

        def __init__(self, status, assignment=None, error=None):
            self.status = status
            self.assignment = assignment
            self.error = error

        @classmethod
        def success(cls, assignment):
            return cls(cls.SUCCESS, assignment=assignment)

        @classmethod
        def failed(cls, error):
            return cls(cls.FAILED, error=error)

        @property
        def is_success(self):
            return self.status == self.SUCCESS

        @property
        def is_failed(self):
            return self.status == self.FAILED

    def __init__(self, assignment, options):
        self.assignment = assignment
        self.options = dict(options)

    @classmethod
    def perform(cls, assignment, options):
        return cls(assignment=assignment, options=options).run()

    def run(self):
        previous_public_repo = self._persisted_public_repo()

        try:
            self.update_attributes()
            new_deadline, remove_deadline = self.plan_deadline()
            self.validate_assignment()
        except self.Error as e:
            return self.Result.failed(str(e))

        old_deadline = self.assignment.deadline
        with transaction.atomic():
            if new_deadline is not None:
                new_deadline.save()
                self.assignment.deadline = new_deadline
            elif remove_deadline:
                self.assignment.deadline = None

            self.assignment.save()

            if old_deadline is not None and (new_deadline is not None or remove_deadline):
                old_deadline.delete()

        if new_deadline is not None:
            new_deadline.create_job()

        self.update_assignment_repo_visibility(previous_public_repo)

        logger.info(f"Assignment {self.assignment.pk} updated")
        return self.Result.success(self.assignment)

    def update_attributes(self):
        for name, value in self.options.items():
            if name == 'deadline':
                continue
            setattr(self.assignment, name, value)

    def plan_deadline(self):
        """
        Return (new_deadline, remove_deadline).

        A missing 'deadline' option leaves the deadline alone, a blank one
        removes it and an unchanged one is a no-op.
        """
        if 'deadline' not in self.options:
            return None, False

        raw = self.options['deadline']
        current = self.assignment.deadline

        if not raw or not str(raw).strip():
            return None, current is not None

        try:
            deadline_at = parse_deadline(str(raw))
        except InvalidDeadlineError as e:
            raise self.Error(str(e)) from e

        if current is not None and current.deadline_at == deadline_at:
            return None, False

        new_deadline = Deadline(deadline_at=deadline_at)
        try:
            new_deadline.full_clean()
        except ValidationError as e:
            raise self.Error('\n'.join(e.messages)) from e
        return new_deadline, False

    def validate_assignment(self):
        try:
            self.assignment.full_clean(exclude=['deadline'])
        except ValidationError as e:
            raise self.Error('\n'.join(e.messages)) from e

    def update_assignment_repo_visibility(self, previous_public_repo):
        if previous_public_repo is None or previous_public_repo == self.assignment.public_repo:
            return

        from .tasks import update_repository_visibility

        update_repository_visibility.enqueue(self.assignment.pk, self.assignment.public_repo)

    def _persisted_public_repo(self):
        return (
            Assignment.all_objects
            .filter(pk=self.assignment.pk)
            .values_list('public_repo', flat=True)
            .first()
        )
