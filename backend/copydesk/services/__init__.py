# Services package init
"""
Copydesk Backend — Services Layer
===================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services receive the DB session per call, apply the rules of their
       endpoint and raise CopydeskError subclasses for the handlers in main.py.

Service Inventory:
    - LLMService (abstract): Interface for text generation providers
    - GeminiService: Concrete implementation using Google Gemini
    - AuthService: Username/password login, bearer token issuance
    - TokenService: Bearer token lookup shared by verify and analyze
    - AnalysisService: auth → input check → standards → generate → parse → store
"""
