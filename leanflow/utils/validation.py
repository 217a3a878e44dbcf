"""
Edit-Boundary Validation

Checks an editor runs before saving an activity. The engines never call these:
they accept whatever data they're given. Each validator returns
(errors, warnings, is_valid) where is_valid means no errors.
"""

from typing import Dict, List, Sequence, Tuple

from leanflow.models import Activity, SubStep, WorkerAssignment, WorkerRole
from leanflow.utils.formatting import format_minutes

ValidationResult = Tuple[List[str], List[str], bool]


def merge_worker_assignments(assignments: Sequence[WorkerAssignment]) -> Tuple[WorkerAssignment, ...]:
    """
    Merge assignments for the same role by summing their counts.

    Two OTHER assignments merge only when their custom names match.
    Assignments with a non-positive count are dropped. First-seen order is kept.

    Example:
        >>> merge_worker_assignments([
        ...     WorkerAssignment(WorkerRole.MASON, 2),
        ...     WorkerAssignment(WorkerRole.MASON, 3),
        ... ])
        (WorkerAssignment(role=<WorkerRole.MASON: 'Mason'>, count=5, custom_role=''),)
    """
    merged: Dict[Tuple[WorkerRole, str], WorkerAssignment] = {}

    for assignment in assignments:
        if assignment.count <= 0:
            continue
        key = (assignment.role, assignment.effective_role)
        existing = merged.get(key)
        if existing is None:
            merged[key] = assignment
        else:
            merged[key] = WorkerAssignment(
                role=existing.role,
                count=existing.count + assignment.count,
                custom_role=existing.custom_role
            )

    return tuple(merged.values())


def validate_worker_assignment(assignment: WorkerAssignment) -> ValidationResult:
    """Count must be positive; OTHER needs a custom role name."""
    errors = []
    warnings = []

    if assignment.count <= 0:
        errors.append(f"Worker count must be positive (got {assignment.count})")

    if assignment.role is WorkerRole.OTHER and not assignment.effective_role:
        errors.append("Enter the role name for 'Other'")

    return errors, warnings, not errors


def validate_sub_step(sub_step: SubStep) -> ValidationResult:
    """
    Validate one sub-step.

    Errors: blank description, end time not after start time, bad crew entries.
    Warnings: no crew, negative equipment count or produced quantity.
    """
    errors = []
    warnings = []

    if not sub_step.description.strip():
        errors.append("Description is required")

    if sub_step.end_time <= sub_step.start_time:
        errors.append(
            f"End time ({format_minutes(sub_step.end_time)}) must be after "
            f"start time ({format_minutes(sub_step.start_time)})"
        )

    if not sub_step.workers:
        warnings.append("No crew assigned - sub-step adds no man-hours")

    for worker in sub_step.workers:
        worker_errors, worker_warnings, _ = validate_worker_assignment(worker)
        errors.extend(worker_errors)
        warnings.extend(worker_warnings)

    if sub_step.machinery_count < 0:
        warnings.append(f"Negative equipment count ({sub_step.machinery_count})")

    if sub_step.produced_quantity < 0:
        warnings.append(f"Negative produced quantity ({sub_step.produced_quantity})")

    return errors, warnings, not errors


def validate_activity(activity: Activity) -> ValidationResult:
    """
    Validate an activity and all of its sub-steps.

    Sub-step messages are prefixed with the sub-step description.
    """
    errors = []
    warnings = []

    shift = activity.shift_span
    if shift.end <= shift.start:
        errors.append(
            f"Shift end ({format_minutes(shift.end)}) must be after "
            f"shift start ({format_minutes(shift.start)})"
        )

    lunch = activity.lunch_span
    if lunch.end <= lunch.start:
        warnings.append("Lunch end is not after lunch start - no lunch block will be shown")
    elif lunch.start < shift.start or lunch.end > shift.end:
        warnings.append(
            f"Lunch ({format_minutes(lunch.start)}-{format_minutes(lunch.end)}) "
            f"is outside the shift"
        )

    interval = activity.analysis_interval_minutes
    if interval <= 0:
        errors.append(f"Analysis interval must be positive (got {interval})")
    elif shift.duration_minutes % interval:
        warnings.append(
            f"Analysis interval of {interval} min does not divide the shift - "
            f"the last window runs past {format_minutes(shift.end)}"
        )

    if activity.target_quantity < 0:
        warnings.append(f"Negative target quantity ({activity.target_quantity})")

    for step in activity.sorted_sub_steps():
        label = step.description or step.id or "(unnamed)"

        step_errors, step_warnings, _ = validate_sub_step(step)
        errors.extend(f"{label}: {message}" for message in step_errors)
        warnings.extend(f"{label}: {message}" for message in step_warnings)

        if step.start_time < shift.start or step.end_time > shift.end:
            warnings.append(f"{label}: runs outside the shift")

    return errors, warnings, not errors
