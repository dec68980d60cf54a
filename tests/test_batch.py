from edura_finance.app.services.batch import BatchResult, ItemOutcome, fold_outcomes


def test_fold_outcomes_counts_each_kind():
    result = fold_outcomes(
        [
            ItemOutcome.created(1),
            ItemOutcome.skipped(2, "already billed"),
            ItemOutcome.failed(3, "Class 7 has no tuition rate set"),
            ItemOutcome.created(4),
        ]
    )
    assert result.created == 2
    assert result.skipped == 1
    assert [(f.id, f.reason) for f in result.failed] == [(3, "Class 7 has no tuition rate set")]


def test_add_returns_new_result():
    empty = BatchResult()
    updated = empty.add(ItemOutcome.created(1))
    assert empty.created == 0
    assert updated.created == 1


def test_as_dict_shape():
    result = fold_outcomes([ItemOutcome.failed(9, "boom")])
    assert result.as_dict() == {"created": 0, "skipped": 0, "failed": [{"id": 9, "reason": "boom"}]}
