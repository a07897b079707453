"""Log handlers for streams, files, the console and e-mail, with file configuration."""