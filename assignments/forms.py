from django import forms
from django.core.exceptions import ValidationError

from .deadlines import InvalidDeadlineError, build_from_string, format_deadline
from .models import Assignment


class AssignmentForm(forms.ModelForm):
    """Form for creating/editing assignments"""

    # Free text, parsed into a Deadline by the view or the editor
    deadline = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'input input-bordered w-full',
            'placeholder': 'MM/DD/YYYY HH:MM'
        }),
        label='Deadline',
        help_text='Optional. Submissions are recorded when the deadline passes'
    )

    class Meta:
        model = Assignment
        fields = [
            'title',
            'slug',
            'public_repo',
            'students_are_repo_admins',
            'invitations_enabled',
            'template_repos_enabled',
        ]
        widgets = {
            'title': forms.TextInput(attrs={
                'class': 'input input-bordered w-full',
                'placeholder': 'e.g., Homework 1: Linked Lists'
            }),
            'slug': forms.TextInput(attrs={
                'class': 'input input-bordered w-full',
                'placeholder': 'e.g., homework-1'
            }),
            'public_repo': forms.CheckboxInput(attrs={
                'class': 'checkbox checkbox-primary'
            }),
            'students_are_repo_admins': forms.CheckboxInput(attrs={
                'class': 'checkbox checkbox-primary'
            }),
            'invitations_enabled': forms.CheckboxInput(attrs={
                'class': 'checkbox checkbox-primary'
            }),
            'template_repos_enabled': forms.CheckboxInput(attrs={
                'class': 'checkbox checkbox-primary'
            }),
        }
        labels = {
            'title': 'Assignment Title',
            'slug': 'Repository Prefix',
            'public_repo': 'Public Repositories',
            'students_are_repo_admins': 'Grant Students Admin Access',
            'invitations_enabled': 'Enable Invitation Link',
            'template_repos_enabled': 'Use Template Repositories',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.is_bound and self.instance.pk:
            self.initial['deadline'] = format_deadline(self.instance.deadline)

    def clean_deadline(self):
        value = self.cleaned_data.get('deadline', '').strip()
        if not value:
            return ''

        try:
            deadline = build_from_string(value)
        except InvalidDeadlineError as e:
            raise ValidationError(str(e))

        current = self.instance.deadline if self.instance.pk else None
        if current is not None and current.deadline_at == deadline.deadline_at:
            return value

        try:
            deadline.full_clean()
        except ValidationError as e:
            raise ValidationError(e.messages)
        return value

    def build_deadline(self):
        """Unsaved Deadline for a valid form, or None when left blank"""
        value = self.cleaned_data.get('deadline')
        if not value:
            return None
        return build_from_string(value)

    def editor_options(self):
        """Cleaned values in the shape AssignmentEditor expects"""
        options = {name: self.cleaned_data[name] for name in self.Meta.fields}
        options['deadline'] = self.cleaned_data.get('deadline', '')
        return options
