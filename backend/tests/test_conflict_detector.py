from types import SimpleNamespace

import pytest

from app.services.allocation_store import AllocationRecord, ComplementaryRecord
from app.services.conflict_detector import ActivityCandidate, AllocationCandidate, ConflictDetector


@pytest.fixture
def detector():
    return ConflictDetector(
        teacher_names={"t-ana": "Ana", "t-bruno": "Prof. Bruno"},
        class_names={"c-7a": "7A", "c-7b": "7B"},
        time_slots={
            "s1": SimpleNamespace(label="1ª", start_time="08:00", end_time="08:50"),
            "s2": SimpleNamespace(label="2ª", start_time="08:50", end_time="09:40"),
        },
        subject_names={"sub-math": "Matemática"},
    )


def allocation(class_id="c-7a", teacher_id="t-ana", slot="s1", day="Monday", semester="1", year="2024"):
    return AllocationRecord(
        id=f"a-{class_id}-{slot}-{semester}",
        class_id=class_id,
        subject_id="sub-math",
        time_slot_id=slot,
        day_of_week=day,
        year=year,
        semester=semester,
        teacher_id=teacher_id,
    )


def activity(text="Planejamento", teacher_id="t-ana", slot="s1", day="Monday", semester="1", year="2024", id="comp-1"):
    return ComplementaryRecord(
        id=id,
        teacher_id=teacher_id,
        time_slot_id=slot,
        day_of_week=day,
        year=year,
        semester=semester,
        activity=text,
    )


def candidate(class_id="c-7b", teacher_id="t-ana", semesters=("1",), slot="s1", day="Monday"):
    return AllocationCandidate(
        class_id=class_id,
        day_of_week=day,
        time_slot_id=slot,
        year="2024",
        semesters=semesters,
        teacher_id=teacher_id,
    )


def test_same_teacher_other_class_same_cell_is_a_class_conflict(detector):
    conflicts = detector.detect(candidate(), [allocation()], [])

    assert [c.to_dict() for c in conflicts] == [
        {
            "kind": "class",
            "semester": "1",
            "day": "Monday",
            "time": "1ª Aula (08:00 - 08:50)",
            "description": "Ana já está na turma 7A",
        }
    ]


def test_resaving_the_same_class_cell_is_not_a_conflict(detector):
    assert detector.detect(candidate(class_id="c-7a"), [allocation()], []) == []


def test_activity_in_cell_conflicts_regardless_of_class(detector):
    for class_id in ("c-7a", "c-7b"):
        conflicts = detector.detect(candidate(class_id=class_id), [], [activity()])

        assert len(conflicts) == 1
        assert conflicts[0].kind == "activity"
        assert conflicts[0].description == "Ana tem atividade complementar registrada de Planejamento"


def test_no_teacher_means_no_conflicts(detector):
    assert detector.detect(candidate(teacher_id=None), [allocation()], [activity()]) == []


def test_other_slot_day_year_or_teacher_do_not_conflict(detector):
    others = [
        allocation(slot="s2"),
        allocation(day="Tuesday"),
        allocation(year="2023"),
        allocation(teacher_id="t-bruno"),
    ]
    assert detector.detect(candidate(), others, []) == []


def test_each_requested_semester_is_checked(detector):
    existing = [allocation(semester="1"), allocation(semester="2")]

    conflicts = detector.detect(candidate(semesters=("1", "2")), existing, [])

    assert [c.semester for c in conflicts] == ["1", "2"]


def test_alias_is_used_as_teacher_display_name(detector):
    conflicts = detector.detect(candidate(teacher_id="t-bruno"), [allocation(teacher_id="t-bruno")], [])

    assert conflicts[0].description == "Prof. Bruno já está na turma 7A"


def test_unknown_lookups_fall_back(detector):
    conflicts = detector.detect(
        candidate(teacher_id="t-x", slot="s9"),
        [allocation(class_id="c-x", teacher_id="t-x", slot="s9")],
        [],
    )

    assert conflicts[0].description == "Professor já está na turma Outra Turma"
    assert conflicts[0].time == "Aula"


def test_conflict_messages(detector):
    single = detector.detect(candidate(), [allocation()], [])
    message = detector.conflict_message(single, class_id="c-7b", time_slot_id="s1")
    assert message.startswith("Não é possível salvar este horário na turma 7B, pois existe conflito em 1º Semestre")
    assert message.endswith("Ana já está na turma 7A")

    multiple = detector.detect(candidate(semesters=("1", "2")), [allocation(), allocation(semester="2")], [])
    message = detector.conflict_message(multiple, class_id="c-7b", time_slot_id="s1")
    assert "existem conflitos" in message
    assert "1ª AULA - MONDAY" in message
    assert "• 2º Semestre: Ana já está na turma 7A" in message


def test_activity_candidate_rejects_teaching_and_duplicate_activity(detector):
    new = ActivityCandidate(teacher_id="t-ana", day_of_week="Monday", time_slot_id="s1", year="2024", semester="1")

    assert [c.kind for c in detector.detect_activity_conflicts(new, [allocation()], [])] == ["class"]
    assert [c.kind for c in detector.detect_activity_conflicts(new, [], [activity()])] == ["activity"]
    assert detector.detect_activity_conflicts(new, [allocation(teacher_id="t-bruno")], []) == []


def test_activity_candidate_ignores_the_row_it_replaces(detector):
    edit = ActivityCandidate(
        teacher_id="t-ana",
        day_of_week="Monday",
        time_slot_id="s1",
        year="2024",
        semester="1",
        replaces_id="comp-1",
    )

    assert detector.detect_activity_conflicts(edit, [], [activity(id="comp-1")]) == []


def test_slot_availability_splits_busy_free_and_other_activities(detector):
    result = detector.slot_availability(
        day="Monday",
        time_slot_id="s1",
        year="2024",
        semesters=["1"],
        allocations=[allocation(), allocation(semester="2", teacher_id="t-bruno")],
        complementary=[
            activity(text="Horário LIVRE", teacher_id="t-bruno", id="c1"),
            activity(text="Reunião", teacher_id="t-x", id="c2"),
        ],
    )

    assert [item["teacher_name"] for item in result.busy] == ["Ana"]
    assert result.busy[0]["class_name"] == "7A"
    assert result.busy[0]["subject_name"] == "Matemática"
    assert [item["teacher_name"] for item in result.free] == ["Prof. Bruno"]
    assert [item["teacher_name"] for item in result.complementary] == ["Desconhecido"]


def test_detector_from_session_uses_display_names(db_session, school):
    detector = ConflictDetector.from_session(db_session)

    assert detector.teacher_name(school.bruno.id) == "Prof. Bruno"
    assert detector.class_names[school.class_7a.id] == "7A"
    assert detector.time_label(school.slot_1.id) == "1ª Aula (08:00 - 08:50)"
