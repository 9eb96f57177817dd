"""
One operation's worth of state.

Every operator action builds a new `SurveySession`: the workbook is opened,
and the config, roster, and registry caches start empty. Nothing is shared
between sessions except what was saved to the workbook and the form host.
"""

import os
from typing import Optional

from team_survey.config import ConfigStore
from team_survey.extractor import ResponseExtractor
from team_survey.form_builder import FormBuilder, get_time_strings
from team_survey.form_host import FormHost, LocalFormHost
from team_survey.harness import ResponseSynthesizer
from team_survey.registry import FormItemRegistry, SidecarTable
from team_survey.results import ResultsCompiler
from team_survey.roster import Roster
from team_survey.students import Students
from team_survey.workbook import WorkbookStore

DEFAULT_WORKBOOK = 'team_survey.xlsx'
DEFAULT_FORMS_DIR = 'forms'


class SurveySession:
    """Wires the components of one operation together."""

    def __init__(self, store: WorkbookStore, host: FormHost, strict_roster: bool = False,
                 verbose: bool = True):
        self.store = store
        self.host = host
        self.strict_roster = strict_roster
        self.verbose = verbose
        self.reset()

    @classmethod
    def open(cls, workbook_path: Optional[str] = None, forms_dir: Optional[str] = None,
             verbose: bool = True, **kwargs) -> 'SurveySession':
        """
        Opens the workbook and form store, falling back to the
        TEAM_SURVEY_WORKBOOK and TEAM_SURVEY_FORMS_DIR environment variables.
        """
        workbook_path = workbook_path or os.environ.get('TEAM_SURVEY_WORKBOOK', DEFAULT_WORKBOOK)
        forms_dir = forms_dir or os.environ.get('TEAM_SURVEY_FORMS_DIR', DEFAULT_FORMS_DIR)
        store = WorkbookStore(path=workbook_path, verbose=verbose)
        return cls(store, LocalFormHost(forms_dir), verbose=verbose, **kwargs)

    def reset(self):
        """Drops every cache by building the components again."""
        self.config = ConfigStore(self.store, verbose=self.verbose)
        self.roster = Roster(self.store, strict=self.strict_roster, verbose=self.verbose)
        self.registry = FormItemRegistry(SidecarTable(self.store), verbose=self.verbose)
        self.builder = FormBuilder(self.config, self.roster, self.registry, self.host, verbose=self.verbose)
        self.time_strings = get_time_strings()

    def extractor(self) -> ResponseExtractor:
        return ResponseExtractor(self.registry, self.time_strings, verbose=self.verbose)

    def students(self) -> Students:
        """Student records merged with the responses on the configured form."""
        return Students(self.roster, self.extractor(), form=self.builder.get_form(), verbose=self.verbose)

    def results(self) -> ResultsCompiler:
        return ResultsCompiler(self.config, verbose=self.verbose)

    def synthesizer(self, seed: Optional[int] = None) -> ResponseSynthesizer:
        return ResponseSynthesizer(self.roster, self.registry, self.builder.get_form(),
                                   self.time_strings, seed=seed, verbose=self.verbose)

    def save(self):
        self.store.save()
