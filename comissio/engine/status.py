"""Payment status toggle for installments."""

from uuid import UUID

from comissio.models.commission import Installment, InstallmentStatus


def toggle_status(
    installments: list[Installment],
    installment_id: UUID,
) -> list[Installment]:
    """
    Flip one installment between PAID and PENDING.

    PAID becomes PENDING; anything else (PENDING or the unused OVERDUE)
    becomes PAID. An unknown id returns an equal list. The input list
    is never modified.
    """
    updated = []
    for inst in installments:
        if inst.id == installment_id:
            new_status = (
                InstallmentStatus.PENDING
                if inst.status == InstallmentStatus.PAID
                else InstallmentStatus.PAID
            )
            inst = inst.model_copy(update={"status": new_status})
        updated.append(inst)
    return updated
