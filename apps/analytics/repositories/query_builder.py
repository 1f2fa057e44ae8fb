# apps/analytics/repositories/query_builder.py
class SQLQueryBuilder:
    def __init__(self, base_query=""):
        self.base_query = base_query
        self.filters = []
        self.params = []

    def add_subject_filter(self, subject):
        # dimension comes from our own entity models, never from request input
        self.filters.append(f"{subject.dimension} = %s")
        self.params.append(subject.entity_id)
        return self

    def add_date_range(self, start_date, end_date):
        self.filters.append("displayed_at_date BETWEEN %s AND %s")
        self.params.extend([start_date, end_date])
        return self

    def build(self) -> tuple:
        where_clause = " AND ".join(self.filters) if self.filters else "1=1"
        final_query = f"{self.base_query} WHERE {where_clause}"
        return final_query, self.params
