SAMPLE_FILENAME = "sample-document.pdf"

SAMPLE_DOCUMENT_TEXT = """
PaperChat - Sample Document

Introduction
PaperChat is an AI-powered PDF chat application that allows users to upload PDF documents and ask questions about their content. The application uses an OpenAI-compatible language model to provide intelligent responses based on the document content.

Key Features
1. PDF Upload: Users can upload PDF files up to 10MB in size
2. Text Extraction: The app extracts text content from uploaded PDFs
3. AI Chat: Users can ask questions about the document content
4. Demo Mode: A sample document is available for testing
5. Feedback System: Users can provide feedback on AI responses

Technical Stack
- Server: FastAPI with pydantic-settings configuration
- PDF Processing: PyMuPDF
- AI Integration: OpenAI chat completions over httpx
- Client: async httpx client with retry and error classification
- Storage: In-memory (no database)

Architecture
The application follows a simple architecture:
- File upload and text extraction via API endpoints
- Document text kept by the client and sent along with each question
- Chat completions for answers and suggested questions
- Real-time feedback collection

User Flow
1. User uploads a PDF document
2. System extracts text content
3. User asks questions about the document
4. AI responds based on document content
5. User provides feedback on responses

This sample document demonstrates the capabilities of PaperChat and provides context for testing the chat functionality.
"""
