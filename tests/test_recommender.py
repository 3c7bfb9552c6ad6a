import unittest

from matcher import is_recommended, rank_jobs, recommendation_keywords


class RecommendationKeywordTests(unittest.TestCase):

    def test_skills_kept_whole_and_searches_split(self):
        keywords = recommendation_keywords(["Machine Learning", " ", "SQL"], ["Data Engineer", None])
        self.assertEqual(keywords, {"machine learning", "sql", "data", "engineer"})

    def test_empty_inputs(self):
        self.assertEqual(recommendation_keywords([], []), set())


class IsRecommendedTests(unittest.TestCase):

    def test_matches_title_substring(self):
        self.assertTrue(is_recommended({'job_title': "Senior Data Engineer"}, {"data"}))

    def test_matches_skill_substring(self):
        job = {'job_title': "Analyst", 'skills': ["PostgreSQL", "Excel"]}
        self.assertTrue(is_recommended(job, {"sql"}))

    def test_no_keywords_never_match(self):
        self.assertFalse(is_recommended({'job_title': "Anything"}, set()))

    def test_unrelated(self):
        self.assertFalse(is_recommended({'job_title': "Chef", 'skills': None}, {"python"}))


class RankJobsTests(unittest.TestCase):

    def test_recommended_first_then_newest(self):
        jobs = [
            {'id': 'old-match', 'job_title': "Python Developer", 'created_at': "2024-01-01T00:00:00.000Z"},
            {'id': 'new-other', 'job_title': "Nurse", 'created_at': "2024-03-01T00:00:00.000Z"},
            {'id': 'new-match', 'job_title': "Python Lead", 'created_at': "2024-02-01T00:00:00.000Z"},
            {'id': 'old-other', 'job_title': "Cook", 'created_at': "2023-12-01T00:00:00.000Z"},
        ]
        ranked = rank_jobs(jobs, {"python"})
        self.assertEqual([j['id'] for j in ranked], ['new-match', 'old-match', 'new-other', 'old-other'])
        self.assertEqual([j['is_recommended'] for j in ranked], [True, True, False, False])

    def test_anonymous_keeps_recency_order(self):
        jobs = [
            {'id': 'a', 'job_title': "A", 'created_at': "2024-01-01T00:00:00.000Z"},
            {'id': 'b', 'job_title': "B", 'created_at': "2024-02-01T00:00:00.000Z"},
        ]
        self.assertEqual([j['id'] for j in rank_jobs(jobs, set())], ['b', 'a'])


if __name__ == '__main__':
    unittest.main()
