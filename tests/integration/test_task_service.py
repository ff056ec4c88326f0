"""
Integration tests for TaskService against an in-memory database.
"""
from datetime import date

import pytest

from models import Task, TaskStatus
from services.task_errors import NotFoundError
from services.task_query_builder import PageRequest, TaskFilters
from services.task_validation import TaskInput


@pytest.mark.integration
class TestTaskSearch:

    def test_default_order_is_newest_first(self, task_service, make_task):
        make_task(title='oldest')
        make_task(title='middle')
        make_task(title='newest')

        page = task_service.get_tasks_with_filters(TaskFilters())
        assert [t['title'] for t in page.items] == ['newest', 'middle', 'oldest']
        assert page.total == 3

    def test_paging_slices_and_reports_total(self, task_service, make_task):
        for i in range(12):
            make_task(title=f'task {i:02d}')

        first = task_service.get_tasks_with_filters(TaskFilters(), page=0, size=5, sort='title,asc')
        third = task_service.get_tasks_with_filters(TaskFilters(), page=2, size=5, sort='title,asc')

        assert [t['title'] for t in first.items] == [f'task {i:02d}' for i in range(5)]
        assert [t['title'] for t in third.items] == ['task 10', 'task 11']
        assert first.total == third.total == 12
        assert first.pages == 3

    def test_negative_page_returns_first_page(self, task_service, make_task):
        make_task(title='only')
        page = task_service.get_tasks_with_filters(TaskFilters(), page=-1)
        assert page.page == 0
        assert [t['title'] for t in page.items] == ['only']

    def test_bad_size_uses_default(self, task_service, make_task):
        for i in range(15):
            make_task(title=f't{i}')
        page = task_service.get_tasks_with_filters(TaskFilters(), size=0)
        assert page.size == 10
        assert len(page.items) == 10

    def test_invalid_sort_field_uses_created_at(self, task_service, make_task):
        make_task(title='b')
        make_task(title='a')
        make_task(title='c')
        page = task_service.get_tasks_with_filters(TaskFilters(), sort='nonsense,desc')
        assert [t['title'] for t in page.items] == ['c', 'a', 'b']

    def test_page_past_end_is_empty(self, task_service, make_task):
        make_task()
        page = task_service.get_tasks_with_filters(TaskFilters(), page=5)
        assert page.items == []
        assert page.total == 1

    def test_status_filter(self, task_service, make_task):
        make_task(title='open', status='TODO')
        make_task(title='closed', status='DONE')
        page = task_service.search(TaskFilters(status=TaskStatus.DONE), PageRequest())
        assert [t['title'] for t in page.items] == ['closed']

    def test_category_filter(self, task_service, make_task, make_category):
        work = make_category('Work')
        home = make_category('Home')
        make_task(title='w', category=work)
        make_task(title='h', category=home)
        make_task(title='none')
        page = task_service.search(TaskFilters(category_id=home.id), PageRequest())
        assert [t['title'] for t in page.items] == ['h']
        assert page.items[0]['category_name'] == 'Home'

    def test_due_date_bounds_are_exclusive(self, task_service, make_task):
        make_task(title='on-after-bound', due_date=date(2024, 1, 10))
        make_task(title='inside', due_date=date(2024, 1, 15))
        make_task(title='on-before-bound', due_date=date(2024, 1, 20))
        make_task(title='no-due-date')

        filters = TaskFilters(due_after=date(2024, 1, 10), due_before=date(2024, 1, 20))
        page = task_service.search(filters, PageRequest())
        assert [t['title'] for t in page.items] == ['inside']

    def test_title_filter_is_case_insensitive_substring(self, task_service, make_task):
        make_task(title='Write REPORT')
        make_task(title='Buy milk')
        make_task(title='100% done')
        page = task_service.search(TaskFilters(title='report'), PageRequest())
        assert [t['title'] for t in page.items] == ['Write REPORT']

        page = task_service.search(TaskFilters(title='%'), PageRequest())
        assert [t['title'] for t in page.items] == ['100% done']

    def test_filters_combine_with_and(self, task_service, make_task, make_category):
        work = make_category('Work')
        make_task(title='report draft', status='TODO', category=work)
        make_task(title='report final', status='DONE', category=work)
        make_task(title='report other', status='TODO')
        filters = TaskFilters(status=TaskStatus.TODO, category_id=work.id, title='report')
        page = task_service.search(filters, PageRequest())
        assert [t['title'] for t in page.items] == ['report draft']

    def test_sort_by_due_date_ascending(self, task_service, make_task):
        make_task(title='later', due_date=date(2024, 3, 1))
        make_task(title='sooner', due_date=date(2024, 2, 1))
        page = task_service.get_tasks_with_filters(TaskFilters(), sort='dueDate,asc')
        assert [t['title'] for t in page.items] == ['sooner', 'later']


@pytest.mark.integration
class TestTaskCrud:

    def test_create_and_get(self, task_service, make_category):
        work = make_category('Work')
        created = task_service.create_task(TaskInput(
            title='Plan sprint',
            status=TaskStatus.TODO,
            description='Backlog grooming',
            due_date=date(2024, 5, 1),
            category_id=work.id,
        ))

        assert created['id'] is not None
        assert created['category_name'] == 'Work'
        assert created['created_at'] == created['updated_at']

        fetched = task_service.get_task(created['id'])
        assert fetched['title'] == 'Plan sprint'
        assert fetched['due_date'] == '2024-05-01'
        assert fetched['category_id'] == work.id
        assert fetched['category_name'] == 'Work'

    def test_create_with_unknown_category_writes_nothing(self, task_service, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            task_service.create_task(TaskInput(title='x', status=TaskStatus.TODO, category_id=404))
        assert exc_info.value.entity == 'Category'
        assert db_session.query(Task).count() == 0

    def test_update_replaces_fields(self, task_service, make_task, make_category):
        task = make_task(title='draft', description='old', due_date=date(2024, 1, 1))
        home = make_category('Home')

        updated = task_service.update_task(task.id, TaskInput(
            title='final', status=TaskStatus.DONE, category_id=home.id
        ))

        assert updated['title'] == 'final'
        assert updated['status'] == 'DONE'
        assert updated['description'] is None
        assert updated['due_date'] is None
        assert updated['category_name'] == 'Home'
        assert updated['updated_at'] > updated['created_at']

    def test_update_missing_task(self, task_service):
        with pytest.raises(NotFoundError) as exc_info:
            task_service.update_task(99999, TaskInput(title='x', status=TaskStatus.TODO))
        assert exc_info.value.entity == 'Task'

    def test_delete(self, task_service, make_task, db_session):
        task = make_task()
        task_service.delete_task(task.id)
        assert db_session.get(Task, task.id) is None

    def test_delete_missing_task_changes_nothing(self, task_service, make_task, db_session):
        make_task(title='keep me')
        with pytest.raises(NotFoundError):
            task_service.delete_task(99999)
        assert db_session.query(Task).count() == 1

    def test_get_missing_task(self, task_service):
        with pytest.raises(NotFoundError) as exc_info:
            task_service.get_task(42)
        assert exc_info.value.message == 'Task with id 42 does not exist'


@pytest.mark.integration
class TestTaskStatistics:

    def test_zero_tasks(self, task_service):
        stats = task_service.get_statistics()
        assert stats.total == 0
        assert stats.by_status == {'TODO': 0, 'IN_PROGRESS': 0, 'DONE': 0}
        assert stats.by_category == {}

    def test_counts_by_status_and_category(self, task_service, make_task, make_category):
        work = make_category('Work')
        make_task(status='TODO', category=work)
        make_task(status='DONE', category=work)
        make_task(status='DONE')

        stats = task_service.get_statistics()
        assert stats.total == 3
        assert stats.by_status == {'TODO': 1, 'IN_PROGRESS': 0, 'DONE': 2}
        assert stats.by_category == {'Work': 2, 'Uncategorized': 1}

    def test_export_returns_all_tasks_unpaged(self, task_service, make_task):
        for i in range(25):
            make_task(title=f't{i}')
        records = task_service.export_tasks()
        assert len(records) == 25
        assert records[0].title == 't24'


@pytest.mark.integration
class TestOutOfRangeInput:

    def test_huge_page_returns_empty_page(self, task_service, make_task):
        make_task(title='only')
        page = task_service.get_tasks_with_filters(TaskFilters(), page=99999999999999999999, size=10)
        assert page.items == []
        assert page.total == 1
        assert page.page == 99999999999999999999

    def test_huge_task_id_is_not_found(self, task_service):
        with pytest.raises(NotFoundError):
            task_service.get_task(99999999999999999999)
        with pytest.raises(NotFoundError):
            task_service.delete_task(99999999999999999999)

    def test_huge_category_id_is_not_found(self, task_service, category_service):
        with pytest.raises(NotFoundError):
            task_service.create_task(TaskInput(title='x', status=TaskStatus.TODO, category_id=2 ** 64))
        with pytest.raises(NotFoundError):
            category_service.get_category(2 ** 64)
