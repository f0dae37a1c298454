"""Helper to store uploaded files, receipts and resumes, under the configured upload folder."""
import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from application.exceptions.exception_request import RequestUploadError

RECEIPT_EXTENSIONS = ( 'jpeg', 'jpg', 'png', 'pdf' )
RESUME_EXTENSIONS = ( 'pdf', 'doc', 'docx' )


def get_file_size( file_storage ):
    """Size of the upload in bytes, leaving the stream at the start."""

    file_storage.stream.seek( 0, os.SEEK_END )
    size = file_storage.stream.tell()
    file_storage.stream.seek( 0 )
    return size


def save_upload( file_storage, subfolder, allowed_extensions ):
    """Validate and save an uploaded file under a random name.

    :param file_storage: The werkzeug FileStorage from request.files.
    :param str subfolder: The folder under UPLOAD_FOLDER, e.g. receipts.
    :param allowed_extensions: The accepted file extensions, lower case.
    :return: The stored path, relative to UPLOAD_FOLDER.
    """

    if not file_storage or not file_storage.filename:
        raise RequestUploadError( 'Please upload a file' )

    filename = secure_filename( file_storage.filename )
    extension = filename.rsplit( '.', 1 )[ -1 ].lower() if '.' in filename else ''
    if extension not in allowed_extensions:
        raise RequestUploadError( 'Please upload one of: {}'.format( ', '.join( allowed_extensions ) ) )

    max_bytes = current_app.config.get( 'MAX_UPLOAD_BYTES', 5000000 )
    if get_file_size( file_storage ) > max_bytes:
        raise RequestUploadError( 'Please upload a file smaller than {} bytes'.format( max_bytes ) )

    upload_folder = os.path.join( current_app.config[ 'UPLOAD_FOLDER' ], subfolder )
    os.makedirs( upload_folder, exist_ok=True )

    stored_name = '{}.{}'.format( uuid.uuid4().hex, extension )
    file_storage.save( os.path.join( upload_folder, stored_name ) )
    logging.info( 'Stored upload %s as %s/%s.', filename, subfolder, stored_name )
    return '{}/{}'.format( subfolder, stored_name )
