"""Test responses: what the harness submits must come back out of extraction."""
import pytest

from conftest import set_counts
from team_survey.errors import UnknownStudentError


def test_full_response_round_trip(built_session):
    expected = built_session.synthesizer(seed=7).submit_test_response_for_student('aneuhold', full=True)
    record = built_session.students().get_by_id('aneuhold')

    assert record['responded'] is True
    for field in ('contact_email', 'github_username', 'utc_offset', 'availability',
                  'proficiencies', 'preferred_students', 'disliked_students'):
        assert record[field] == expected[field], field
    # Three classmates for four slots
    assert len(record['preferred_students']) == 2
    assert len(record['disliked_students']) == 1


def test_teammates_are_distinct_and_exclude_respondent(built_session):
    synthesizer = built_session.synthesizer(seed=1)
    for _ in range(5):
        _, expected = synthesizer.synthesize('blopez2', full=True)
        chosen = expected['preferred_students'] + expected['disliked_students']
        assert 'blopez2' not in chosen
        assert len(set(chosen)) == len(chosen)


def test_more_slots_than_classmates(session):
    set_counts(session, 3, 3)
    session.builder.create()
    session.builder.update_form()

    _, expected = session.synthesizer(seed=2).synthesize('cwei', full=True)
    assert len(expected['preferred_students']) == 3
    assert expected['disliked_students'] == []


def test_responses_for_all_students(built_session):
    submitted = built_session.synthesizer(seed=3).submit_test_responses_for_all_students()
    students = built_session.students()

    assert sorted(submitted) == ['aneuhold', 'blopez2', 'cwei', 'dscott7']
    assert students.get_respondents() == ['aneuhold', 'blopez2', 'cwei', 'dscott7']
    for student_id, expected in submitted.items():
        assert students.get_by_id(student_id)['preferred_students'] == expected['preferred_students']


def test_same_seed_same_answers(built_session):
    _, first = built_session.synthesizer(seed=11).synthesize('dscott7')
    _, second = built_session.synthesizer(seed=11).synthesize('dscott7')
    assert first == second


def test_unknown_student(built_session):
    with pytest.raises(UnknownStudentError):
        built_session.synthesizer().synthesize('nobody')


def test_response_is_not_submitted_until_asked(built_session):
    response, _ = built_session.synthesizer(seed=5).synthesize('cwei')
    assert response.id is None
    assert built_session.builder.get_form().get_responses() == []
