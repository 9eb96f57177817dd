"""
Form Builder
============

Creates the survey form and its questions, and records the IDs of the
questions it creates in the form item registry.

Build order:
    1. Student information: ASUrite ID, Taiga email, GitHub username, time zone
    2. Weekly availability grid
    3. One 1-5 proficiency scale per configured proficiency question
    4. `numPreferredStudents` preferred teammate choices
    5. `numDislikedStudents` disliked teammate choices

There is no rollback. If a build fails half way, clear the form
(`delete_all_items`) and build again.
"""

from datetime import datetime
from typing import List

from team_survey import items
from team_survey.config import ConfigStore
from team_survey.date_util import generate_time_strings, get_utc_time_zone_strings, get_weekday_strings
from team_survey.errors import FormAlreadyConfiguredError, FormNotConfiguredError, FormNotFoundError
from team_survey.form_host import Form, FormHost
from team_survey.registry import FormItemRegistry
from team_survey.roster import Roster

ID_PATTERN = r'\s*[A-Za-z0-9._-]+\s*'
EMAIL_PATTERN = r'\s*[^@\s]+@[^@\s]+\.[^@\s]+\s*'


def get_time_strings() -> List[str]:
    """Rows of the availability grid."""
    return generate_time_strings(items.AVAILABILITY_SLOT_HOURS)


class FormBuilder:
    """Builds and maintains the survey form attached to the workbook."""

    def __init__(self, config: ConfigStore, roster: Roster, registry: FormItemRegistry,
                 host: FormHost, verbose: bool = True):
        self.config = config
        self.roster = roster
        self.registry = registry
        self.host = host
        self.verbose = verbose

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    # ========== FORM LIFECYCLE ==========

    def get_form(self) -> Form:
        """
        The form whose ID is stored in the config.

        Raises:
            FormNotConfiguredError: if no form ID is stored
        """
        form_id = self.config.get(ConfigStore.FORM_ID)
        if form_id == '':
            raise FormNotConfiguredError()
        return self.host.open_form(form_id)

    def create(self) -> Form:
        """
        Creates a new, empty form and stores its ID in the config.

        Raises:
            FormAlreadyConfiguredError: if a form ID is already stored
        """
        form_id = self.config.get(ConfigStore.FORM_ID)
        if form_id != '':
            raise FormAlreadyConfiguredError(form_id)

        title = self.config.require(ConfigStore.FORM_TITLE)
        form = self.host.create_form(title)
        self.log("New form was created")
        form.set_description(self.config.get(ConfigStore.FORM_DESCRIPTION))
        self.config.set_value(ConfigStore.FORM_ID, form.id)
        self.log(f"The formId range was set to the new form ID {form.id}")
        return form

    def delete(self):
        """
        Deletes the form, its responses, and the stored form item IDs. A form
        ID that the host no longer knows is still cleared from the config.
        """
        try:
            form_id = self.get_form().id
        except FormNotFoundError as e:
            form_id = e.form_id
            self.log(f"  WARNING: {e}. Clearing the stored form ID anyway.")
        self.host.delete_form(form_id)
        self.config.set_value(ConfigStore.FORM_ID, '')
        self.registry.clear()
        self.log(f"Form {form_id} was deleted")

    def delete_all_items(self) -> int:
        """Removes every question from the form but keeps the form and its responses."""
        count = self.get_form().delete_all_items()
        self.log(f"Deleted {count} items from the form")
        return count

    def permanently_clear_responses(self) -> int:
        count = self.get_form().delete_all_responses()
        self.log(f"Permanently deleted {count} responses")
        return count

    def update_form(self) -> Form:
        """Rebuilds every question of the form from the config and the roster."""
        form = self.get_form()
        form.set_title(self.config.require(ConfigStore.FORM_TITLE))
        form.set_description(self.config.get(ConfigStore.FORM_DESCRIPTION))
        if form.get_items():
            self.log(f"Removing {form.delete_all_items()} existing items")
        self.build(form)
        return form

    # ========== QUESTIONS ==========

    def build(self, form: Form):
        """Adds every question to `form` in the build order and registers its IDs."""
        config_obj = self.config.get_obj()
        combos = self.roster.get_id_name_combos()
        if not combos:
            self.log("  WARNING: The roster is empty; teammate questions will have no choices")

        self._add_student_information(form)
        self._add_availability(form)
        self._add_proficiencies(form, config_obj[ConfigStore.PROFICIENCY_QUESTIONS])
        self._add_teammates(form, items.PREFERRED_STUDENTS, 'Preferred Teammates',
                            'Preferred Student', config_obj[ConfigStore.NUM_PREFERRED_STUDENTS], combos)
        self._add_teammates(form, items.DISLIKED_STUDENTS, 'Teammates to Avoid',
                            'Disliked Student', config_obj[ConfigStore.NUM_DISLIKED_STUDENTS], combos)
        self.log(f"Form built with {len(form.get_items())} items")

    def _add_student_information(self, form: Form):
        form.add_page_break_item('Student Information')

        item_id = form.add_text_item(
            'What is your ASUrite ID?', pattern=ID_PATTERN, required=True,
            validation_help='Enter your ASUrite ID, for example aneuhold')
        self.registry.register(items.ASURITE_QUESTION, [item_id])

        item_id = form.add_text_item(
            'What email address do you use for Taiga?', pattern=EMAIL_PATTERN,
            validation_help='Enter a valid email address')
        self.registry.register(items.TAIGA_EMAIL_QUESTION, [item_id])

        item_id = form.add_text_item('What is your GitHub username?')
        self.registry.register(items.GITHUB_USERNAME_QUESTION, [item_id])

        item_id = form.add_list_item('What time zone are you in?', get_utc_time_zone_strings())
        self.registry.register(items.TIME_ZONE_QUESTION, [item_id])

    def _add_availability(self, form: Form):
        item_id = form.add_grid_item(
            'When are you available to meet with your team? (times in your time zone)',
            rows=get_time_strings(), columns=get_weekday_strings())
        self.registry.register(items.AVAILABILITY_QUESTION, [item_id])

    def _add_proficiencies(self, form: Form, questions: List[str]):
        form.add_page_break_item('Proficiencies',
                                 help_text='Rate yourself from 1 (no experience) to 5 (expert).')
        item_ids = [form.add_scale_item(question, 1, 5, 'No experience', 'Expert')
                    for question in questions]
        assert len(item_ids) == len(questions), 'one scale per proficiency question'
        self.registry.register(items.PROFICIENCY_QUESTIONS, item_ids)

    def _add_teammates(self, form: Form, item_name: str, section_title: str,
                       question_title: str, count: int, combos: List[str]):
        item_ids = []
        if count > 0:
            form.add_page_break_item(section_title)
            for i in range(count):
                item_ids.append(form.add_list_item(f'{question_title} {i + 1}', combos))
        assert len(item_ids) == count, f'one choice per {item_name} slot'
        self.registry.register(item_name, item_ids)
