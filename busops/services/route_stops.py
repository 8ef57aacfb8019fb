"""Merge a route's stops into the entries a driver sees on the road.

School stops collapse per (school, stop type); home stops collapse per
household. A stop with neither stays on its own.
"""
from busops.schemas.route import GroupedStop, SchoolInfo, StopInput, StudentInfo

SCHOOL_STOP_TYPES = {"pickup_school", "dropoff_school"}


def is_school_stop(stop: StopInput) -> bool:
    return stop.stop_type in SCHOOL_STOP_TYPES and stop.school_id is not None


def _group_key(stop: StopInput, student: StudentInfo | None) -> tuple | None:
    if is_school_stop(stop):
        return ("school", stop.school_id, stop.stop_type)
    household_id = (student.household_id if student else None) or stop.household_id
    if household_id:
        return ("household", household_id)
    return None


def _students(
    group: list[StopInput], students: dict[str, StudentInfo]
) -> tuple[list[str], list[str]]:
    names: list[str] = []
    ids: list[str] = []
    seen: set[str] = set()
    for stop in group:
        if stop.student_id is None or stop.student_id in seen:
            continue
        seen.add(stop.student_id)
        student = students.get(stop.student_id)
        if student and student.full_name:
            names.append(student.full_name)
            ids.append(stop.student_id)
    return names, ids


def _address(group: list[StopInput], school: SchoolInfo | None, student: StudentInfo | None) -> str:
    for candidate in (
        group[0].address,
        school.address if school else None,
        student.pickup_address if student else None,
    ):
        if candidate:
            return candidate
    return ""


def _merge(
    key: tuple | None,
    group: list[StopInput],
    students: dict[str, StudentInfo],
    schools: dict[str, SchoolInfo],
) -> GroupedStop:
    first = group[0]
    student = students.get(first.student_id) if first.student_id else None
    school = schools.get(first.school_id) if first.school_id else None
    names, ids = _students(group, students)
    sequence = min(stop.sequence for stop in group)
    kind = key[0] if key else None

    household_id = None
    if kind == "household":
        household_id = key[1]
    elif kind is None:
        household_id = (student.household_id if student else None) or first.household_id

    if kind == "school":
        guardian_name = guardian_phone = None
    else:
        guardian_name = student.primary_guardian_name if student else None
        guardian_phone = student.primary_guardian_phone if student else None

    # Home stops only name the school when the stop itself points at one.
    show_school = kind != "household" and school is not None

    return GroupedStop(
        id=first.id,
        route_id=first.route_id,
        sequence=sequence,
        address=_address(group, school, student),
        planned_time=first.planned_time,
        stop_type=first.stop_type or ("dropoff_school" if kind == "school" else "student"),
        student_name=", ".join(names) if names else None,
        student_id=first.student_id,
        primary_guardian_name=guardian_name,
        primary_guardian_phone=guardian_phone,
        name=school.name if show_school else None,
        phone=school.phone if show_school else None,
        household_id=household_id,
        household_students=names,
        household_student_ids=ids,
    )


def group_route_stops(
    stops: list[StopInput],
    students: dict[str, StudentInfo],
    schools: dict[str, SchoolInfo],
) -> list[GroupedStop]:
    """Group one route's stops and order the result by sequence.

    Students inside a group keep the order in which their stops appear in
    ``stops`` and are listed once even when they have several stops.
    """
    groups: dict[tuple, list[StopInput]] = {}
    entries: list[tuple[tuple | None, list[StopInput]]] = []
    for stop in stops:
        student = students.get(stop.student_id) if stop.student_id else None
        key = _group_key(stop, student)
        if key is None:
            entries.append((None, [stop]))
        elif key in groups:
            groups[key].append(stop)
        else:
            groups[key] = [stop]
            entries.append((key, groups[key]))

    merged = [_merge(key, group, students, schools) for key, group in entries]
    merged.sort(key=lambda s: s.sequence)
    return merged
